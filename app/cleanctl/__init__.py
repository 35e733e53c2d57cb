"""cleanctl - safety-first disk cleanup engine.

Expands cleanup path catalogs into concrete targets, detects leftovers of
uninstalled applications, probes folder access and moves validated
candidates to the trash.
"""

__version__ = "0.3.0"
