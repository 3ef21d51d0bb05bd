"""Food composition table (FCT) catalog checks."""

from collections import defaultdict
from typing import Dict, Iterable, List, Set

from sqlalchemy.orm import Session

from food_locales.models import NutrientTableRecord
from food_locales.services.database import session_scope
from food_locales.services.dto import FoodCompositionTableReference

# Keeps each IN list under SQLite's bound parameter limit
QUERY_CHUNK_SIZE = 500


def _existing_record_ids(table_id: str, record_ids: List[str], session: Session) -> Set[str]:
    existing = set()
    for start in range(0, len(record_ids), QUERY_CHUNK_SIZE):
        chunk = record_ids[start : start + QUERY_CHUNK_SIZE]
        existing.update(
            record_id
            for (record_id,) in session.query(NutrientTableRecord.id).filter(
                NutrientTableRecord.nutrient_table_id == table_id,
                NutrientTableRecord.id.in_(chunk),
            )
        )
    return existing


def _check_food_composition_codes_impl(
    references: List[FoodCompositionTableReference], session: Session
) -> List[str]:
    if not references:
        return []

    by_table: Dict[str, List[str]] = defaultdict(list)
    for ref in references:
        by_table[ref.table_id].append(ref.record_id)

    missing = []
    for table_id, record_ids in by_table.items():
        existing = _existing_record_ids(table_id, record_ids, session)
        missing.extend(
            FoodCompositionTableReference(table_id, record_id)
            for record_id in record_ids
            if record_id not in existing
        )

    return [
        f"Food composition record {ref.record_id} does not exist in table {ref.table_id}"
        for ref in sorted(missing, key=lambda r: (r.table_id, r.record_id))
    ]


def check_food_composition_codes(
    references: Iterable[FoodCompositionTableReference], session: Session = None
) -> List[str]:
    """
    Report FCT references that point at records missing from the catalog.

    Args:
        references: References to check; repeats are reported once
        session: Optional SQLAlchemy session for transaction sharing.
                 If None, creates a new session scope.

    Returns:
        One message per missing record, sorted by table then record id

    Example:
        >>> check_food_composition_codes([FoodCompositionTableReference("NDNS", "99999")])
        ['Food composition record 99999 does not exist in table NDNS']
    """
    unique_refs = list(dict.fromkeys(references))

    if session is not None:
        return _check_food_composition_codes_impl(unique_refs, session)

    with session_scope() as session:
        return _check_food_composition_codes_impl(unique_refs, session)
