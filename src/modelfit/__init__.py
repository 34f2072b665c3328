"""modelfit - Pick the local LLM your GPU can actually run.

modelfit resolves a free-text GPU identifier into a capability profile
(vendor, platform class, memory budget, performance tier) and uses the
memory budget to rank downloadable model builds from a remote catalog.

Key modules:

- :mod:`modelfit.gpu` - Reference database, name normalization, GPU resolver
- :mod:`modelfit.catalog` - Model catalog client, leaderboard enrichment, ranker
- :mod:`modelfit.selection` - Selection policy tying the resolver to the ranker
- :mod:`modelfit.session` - Session context and persisted chat history
- :mod:`modelfit.llm` - Inference engine protocol and OpenAI-compatible engine
- :mod:`modelfit.hardware` - Host GPU probe
"""

__version__ = "0.1.0"
