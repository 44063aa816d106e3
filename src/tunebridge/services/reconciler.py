"""Set-difference reconciliation between two track collections."""

from collections.abc import Sequence

from tunebridge.models.results import Reconciliation


def reconcile(source_ids: Sequence[str], dest_ids: Sequence[str]) -> Reconciliation:
    """Compute what must be added or removed to align two collections.

    Membership uses exact identifier equality. Each output keeps the order
    of the list it was filtered from, duplicates included.

    Args:
        source_ids: Track identifiers of the source, in order.
        dest_ids: Track identifiers of the destination, in order.

    Returns:
        Reconciliation with ``to_dest``, ``to_source`` and
        ``to_remove_from_dest``.
    """
    source_set = frozenset(source_ids)
    dest_set = frozenset(dest_ids)

    to_dest = [track_id for track_id in source_ids if track_id not in dest_set]
    missing_from_source = [
        track_id for track_id in dest_ids if track_id not in source_set
    ]

    return Reconciliation(
        to_dest=to_dest,
        to_source=missing_from_source,
        to_remove_from_dest=list(missing_from_source),
    )
