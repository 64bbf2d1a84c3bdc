"""
Stored shapes for the JSON columns on ``Order``.

Both ``items`` and ``address`` are written as ``{"version": N, "entries": [...]}``
and decoded through the functions here, so writer and reader agree on the
shape. Rows written before versioning hold a bare list (or a JSON string of
one); those decode as version 0.
"""
import json

ITEMS_SCHEMA_VERSION = 1
ADDRESS_SCHEMA_VERSION = 1


class MalformedPayloadError(ValueError):
    pass


def _encode(version, entries):
    return {'version': version, 'entries': list(entries)}


def _decode(stored, current_version, label, objects_only=True):
    if isinstance(stored, str):
        try:
            stored = json.loads(stored)
        except json.JSONDecodeError as e:
            raise MalformedPayloadError(f"{label} payload is not valid JSON: {e}") from e

    if isinstance(stored, list):
        entries = stored
    elif isinstance(stored, dict) and 'entries' in stored:
        version = stored.get('version')
        if version != current_version:
            raise MalformedPayloadError(f"Unsupported {label} schema version: {version!r}")
        entries = stored['entries']
    else:
        raise MalformedPayloadError(f"{label} payload has unexpected shape: {type(stored).__name__}")

    if not isinstance(entries, list):
        raise MalformedPayloadError(f"{label} entries must be a list")
    if objects_only and not all(isinstance(entry, dict) for entry in entries):
        raise MalformedPayloadError(f"{label} entries must be a list of objects")
    return entries


def encode_items(items):
    return _encode(ITEMS_SCHEMA_VERSION, items)


def decode_items(stored):
    return _decode(stored, ITEMS_SCHEMA_VERSION, 'items', objects_only=False)


def encode_address(entries):
    return _encode(ADDRESS_SCHEMA_VERSION, entries)


def decode_address(stored):
    return _decode(stored, ADDRESS_SCHEMA_VERSION, 'address')


def contact_email(address_entries):
    """The first address entry's email is the order's contact address."""
    if not address_entries:
        return None
    return address_entries[0].get('email') or None
