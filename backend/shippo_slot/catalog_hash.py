"""Catalog hash shared by telemetry, GET /catalog and the simulation script.

The hash MUST be computed identically everywhere so that round telemetry
and simulation CSVs can be correlated with the catalog that produced them.
"""
import hashlib
import json

from shippo_slot.logic.catalog import ReelCatalog


def get_catalog_hash(catalog: ReelCatalog) -> str:
    """
    Generate hash of a catalog.

    Returns 16-char hex hash of the canonical catalog JSON.
    """
    canonical = json.dumps(
        catalog.to_dict(), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]
