"""Host hardware probing."""

from modelfit.hardware.detect import HardwareInfo, probe_gpu_name, probe_hardware

__all__ = ["HardwareInfo", "probe_gpu_name", "probe_hardware"]
