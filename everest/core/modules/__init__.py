"""
Mod metadata + lifecycle contract.

WHY THIS PACKAGE EXISTS:
The host must be able to describe every discovered mod (name, version, code
location, dependencies) from its metadata document without running mod code,
and drive mods through one narrow lifecycle contract.

Import from the submodules (contract, models, parser, version) directly.
core.config imports modules.version, so nothing is re-exported here.
"""
