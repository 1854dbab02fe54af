"""worm-scan core package.

Audits an installed npm dependency tree against a feed of known-malicious
package versions. The matching engine lives in :mod:`worm_scan.matcher` and
has no I/O of its own, so it can be driven by the CLI or by other tools.
"""

__version__ = "0.2.0"

__all__ = [
    "__version__",
    "core",
]
