"""
Resolve-then-freeze for catalog references.
"""


def freeze_snapshot(registry, name):
    """
    Copy the current attributes of the catalog entry named `name`.

    Args:
        registry: LookupRegistry of the catalog to resolve against
        name: Referenced entry name

    Returns:
        dict of the model's SNAPSHOT_FIELDS, or None when no entry has that name
    """
    entity = registry.resolve(name)
    if entity is None:
        return None
    return entity.snapshot()
