"""Locale Derivation Service - builds a locale from a curated spreadsheet.

A run takes the actions parsed from one spreadsheet and applies them to a
destination locale, using a source locale as the template:

    VALIDATING       destination exists; parser errors, portion-size
                     references, food composition records and categories
                     are all checked. Any problem rejects the run before
                     a single write.
    CODE_ASSIGNMENT  new foods, copies and clones get codes that are unique
                     within the run and then against the database.
    COMMITTING       all writes happen in one transaction.
    DONE / REJECTED

Prototype locales:
    When the destination locale's prototype is the source locale, an
    Include writes only the local description and nutrient mapping. The
    destination inherits portion sizes, associated foods and brands from
    its prototype, so they are not copied.

Usage:
    service = DeriveLocaleService()
    result = service.derive_locale_from_file("nz.csv", "nz1", "en_GB", "en_NZ")
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set, TextIO, Tuple, Union

from sqlalchemy.orm import Session

from food_locales.services import (
    category_service,
    locale_service,
    nutrient_table_service,
    portion_size_service,
)
from food_locales.services.database import session_scope
from food_locales.services.derive_locale.actions import (
    Clone,
    FoodAction,
    Include,
    New,
    NoAction,
    unexpected_action,
)
from food_locales.services.derive_locale.food_codes import (
    ensure_unique_in_database,
    make_unique_code_and_remember,
)
from food_locales.services.derive_locale.parsers import get_parser
from food_locales.services.derive_locale.portion_size_validation import (
    add_as_served_leftovers,
    validate_portion_size_methods,
)
from food_locales.services.dto import (
    CopyFood,
    CopyLocalFood,
    FoodCompositionTableReference,
    FoodDescription,
    InheritableAttributes,
    NewFood,
    NewLocalFood,
)
from food_locales.services.exceptions import DeriveLocaleRejected
from food_locales.services.food_store import FoodStore
from food_locales.services.logging_utils import get_service_logger, log_operation
from food_locales.utils.constants import (
    DEFAULT_FOOD_GROUP_ID,
    USE_AS_RECIPE_INGREDIENT,
    USE_AS_REGULAR_FOOD,
)

logger = get_service_logger(__name__)

PathOrStream = Union[str, os.PathLike, TextIO]


class DerivationState(Enum):
    """Stage of a derivation run."""

    VALIDATING = "validating"
    CODE_ASSIGNMENT = "code_assignment"
    COMMITTING = "committing"
    DONE = "done"
    REJECTED = "rejected"


@dataclass(frozen=True)
class DeriveLocaleResult:
    """Summary of a committed derivation run.

    Attributes:
        source_locale_id: Template locale
        dest_locale_id: Locale that was built
        created_codes: Codes of brand-new foods
        copied_codes: Codes of copies and clones of existing foods
        included_codes: Every code added to the destination's food list
        substitutions: Generated codes replaced because they were taken
    """

    source_locale_id: str
    dest_locale_id: str
    created_codes: Tuple[str, ...] = ()
    copied_codes: Tuple[str, ...] = ()
    included_codes: Tuple[str, ...] = ()
    substitutions: Dict[str, str] = field(default_factory=dict)

    @property
    def created_count(self) -> int:
        return len(self.created_codes)

    @property
    def copied_count(self) -> int:
        return len(self.copied_codes)

    @property
    def included_count(self) -> int:
        return len(self.included_codes)


@dataclass
class _Plan:
    """Store requests for one run, in commit order."""

    new_foods: List[NewFood] = field(default_factory=list)
    food_copies: List[CopyFood] = field(default_factory=list)
    new_local_foods: List[NewLocalFood] = field(default_factory=list)
    local_copies: List[CopyLocalFood] = field(default_factory=list)
    codes_to_include: List[str] = field(default_factory=list)


def _generated_descriptions(action: FoodAction) -> Sequence[FoodDescription]:
    """Descriptions of the foods an action creates under new codes."""
    if isinstance(action, New):
        return action.descriptions
    if isinstance(action, Include):
        return action.copies
    if isinstance(action, Clone):
        return (action.description,)
    if isinstance(action, NoAction):
        return ()
    unexpected_action(action)


def _nutrient_codes(
    reference: Optional[FoodCompositionTableReference],
) -> Tuple[FoodCompositionTableReference, ...]:
    return (reference,) if reference is not None else ()


def parse_file(path_or_stream: PathOrStream, format_id: str) -> Tuple[List[str], List[FoodAction]]:
    """
    Parse a locale spreadsheet (CSV) with the parser for format_id.

    Files are read as UTF-8; a byte-order mark from spreadsheet exports is
    ignored.

    Raises:
        UnknownFormatError: If format_id is not registered
        UnicodeDecodeError: If the file is not UTF-8
    """
    parse_table = get_parser(format_id)

    if isinstance(path_or_stream, (str, os.PathLike)):
        with open(path_or_stream, encoding="utf-8-sig", newline="") as f:
            return parse_table(f)

    return parse_table(path_or_stream)


class DeriveLocaleService:
    """Applies parsed spreadsheet actions to a destination locale.

    Args:
        store: Food store used for code checks and all writes
        year: Year stamped into generated codes (defaults to the current year)
    """

    def __init__(self, store: Optional[FoodStore] = None, year: Optional[int] = None):
        self.store = store if store is not None else FoodStore()
        self.year = year
        self.state: Optional[DerivationState] = None

    def _enter(self, state: DerivationState, level: int = logging.INFO, **context) -> None:
        self.state = state
        log_operation(logger, operation="derive_locale", outcome=state.value, level=level, **context)

    # =========================================================================
    # Validating
    # =========================================================================

    def _validate(
        self,
        source_locale_id: str,
        dest_locale_id: str,
        actions: Sequence[FoodAction],
        parse_errors: Sequence[str],
        session: Session,
    ) -> Tuple[bool, Set[str]]:
        dest_locale = locale_service.get_locale(dest_locale_id, session)
        locale_service.get_locale(source_locale_id, session)

        as_served_ids = portion_size_service.get_as_served_set_ids(session)
        guide_image_ids = portion_size_service.get_guide_image_ids(session)
        drinkware_ids = portion_size_service.get_drinkware_ids(session)

        errors = list(parse_errors)
        fct_references = []
        category_codes = []

        for action in actions:
            if isinstance(action, New):
                prefix = f'In row {action.source_row}, "{action.descriptions[0].english_description}": '
                errors.extend(
                    prefix + problem
                    for problem in validate_portion_size_methods(
                        action.portion_size_methods, as_served_ids, guide_image_ids, drinkware_ids
                    )
                )
                fct_references.append(action.fct_reference)
                category_codes.extend(action.categories)
            elif isinstance(action, (Include, Clone)):
                if action.fct_reference is not None:
                    fct_references.append(action.fct_reference)
            elif isinstance(action, NoAction):
                pass
            else:
                unexpected_action(action)

        errors.extend(nutrient_table_service.check_food_composition_codes(fct_references, session))
        errors.extend(category_service.check_category_codes(category_codes, session))

        if errors:
            self._enter(
                DerivationState.REJECTED,
                level=logging.WARNING,
                dest_locale=dest_locale_id,
                error_count=len(errors),
            )
            raise DeriveLocaleRejected(errors)

        is_prototype = dest_locale.prototype_locale_id == source_locale_id
        return is_prototype, as_served_ids

    # =========================================================================
    # Code assignment
    # =========================================================================

    def _assign_codes(
        self, actions: Sequence[FoodAction], session: Session
    ) -> Tuple[List[str], Dict[str, str]]:
        in_run_codes: Set[str] = set()
        generated = []

        for action in actions:
            for description in _generated_descriptions(action):
                generated.append(
                    make_unique_code_and_remember(
                        description.english_description, in_run_codes, self.year
                    )
                )

        substitutions = ensure_unique_in_database(generated, self.store, session)
        return [substitutions.get(code, code) for code in generated], substitutions

    def _build_plan(
        self,
        actions: Sequence[FoodAction],
        codes: List[str],
        is_prototype: bool,
        as_served_ids: Set[str],
    ) -> _Plan:
        plan = _Plan()
        assigned = iter(codes)

        for action in actions:
            if isinstance(action, New):
                use_in_recipes = USE_AS_RECIPE_INGREDIENT if action.recipes_only else USE_AS_REGULAR_FOOD
                portion_size_methods = add_as_served_leftovers(
                    action.portion_size_methods, as_served_ids
                )
                for description in action.descriptions:
                    code = next(assigned)
                    plan.new_foods.append(
                        NewFood(
                            code,
                            description.english_description,
                            DEFAULT_FOOD_GROUP_ID,
                            InheritableAttributes(use_in_recipes=use_in_recipes),
                            action.categories,
                        )
                    )
                    plan.new_local_foods.append(
                        NewLocalFood(
                            code,
                            description.local_description,
                            _nutrient_codes(action.fct_reference),
                            portion_size_methods,
                        )
                    )
                    plan.codes_to_include.append(code)

            elif isinstance(action, Include):
                if is_prototype:
                    plan.new_local_foods.append(
                        NewLocalFood(
                            action.food_code,
                            action.local_description,
                            _nutrient_codes(action.fct_reference),
                        )
                    )
                else:
                    plan.local_copies.append(
                        CopyLocalFood(
                            action.food_code,
                            action.food_code,
                            action.local_description,
                            action.fct_reference,
                        )
                    )
                plan.codes_to_include.append(action.food_code)

                for copy in action.copies:
                    code = next(assigned)
                    plan.food_copies.append(CopyFood(action.food_code, code, copy.english_description))
                    plan.local_copies.append(
                        CopyLocalFood(action.food_code, code, copy.local_description, action.fct_reference)
                    )
                    plan.codes_to_include.append(code)

            elif isinstance(action, Clone):
                code = next(assigned)
                plan.food_copies.append(
                    CopyFood(action.source_code, code, action.description.english_description)
                )
                plan.local_copies.append(
                    CopyLocalFood(
                        action.source_code,
                        code,
                        action.description.local_description,
                        action.fct_reference,
                    )
                )
                plan.codes_to_include.append(code)

            elif isinstance(action, NoAction):
                continue

            else:
                unexpected_action(action)

        return plan

    # =========================================================================
    # Committing
    # =========================================================================

    def _commit(self, plan: _Plan, source_locale_id: str, dest_locale_id: str, session: Session) -> None:
        self.store.create_foods(plan.new_foods, session)
        self.store.copy_foods(plan.food_copies, session)
        self.store.create_local_foods(plan.new_local_foods, dest_locale_id, session)
        self.store.copy_local_foods(source_locale_id, dest_locale_id, plan.local_copies, session)
        self.store.copy_categories(source_locale_id, dest_locale_id, session)
        self.store.add_foods_to_locale(plan.codes_to_include, dest_locale_id, session)

    def _assign_and_commit(
        self,
        source_locale_id: str,
        dest_locale_id: str,
        actions: Sequence[FoodAction],
        is_prototype: bool,
        as_served_ids: Set[str],
        session: Session,
    ) -> DeriveLocaleResult:
        self._enter(DerivationState.CODE_ASSIGNMENT, dest_locale=dest_locale_id)
        codes, substitutions = self._assign_codes(actions, session)
        plan = self._build_plan(actions, codes, is_prototype, as_served_ids)

        self._enter(
            DerivationState.COMMITTING,
            dest_locale=dest_locale_id,
            new_food_count=len(plan.new_foods),
            copy_count=len(plan.food_copies),
            substitution_count=len(substitutions),
        )
        self._commit(plan, source_locale_id, dest_locale_id, session)

        return DeriveLocaleResult(
            source_locale_id=source_locale_id,
            dest_locale_id=dest_locale_id,
            created_codes=tuple(f.code for f in plan.new_foods),
            copied_codes=tuple(c.new_code for c in plan.food_copies),
            included_codes=tuple(dict.fromkeys(plan.codes_to_include)),
            substitutions=substitutions,
        )

    # =========================================================================
    # Public API
    # =========================================================================

    def derive_locale(
        self,
        source_locale_id: str,
        dest_locale_id: str,
        actions: Sequence[FoodAction],
        parse_errors: Sequence[str] = (),
        session: Session = None,
    ) -> DeriveLocaleResult:
        """
        Build or update dest_locale_id from source_locale_id.

        Args:
            source_locale_id: Locale whose foods and local data are the template
            dest_locale_id: Locale to build
            actions: Parsed spreadsheet actions, in row order
            parse_errors: Row errors from the parser; any makes the run fail
            session: Optional SQLAlchemy session for transaction sharing.
                     If None, validation and the commit each get their own
                     session scope and the commit is atomic.

        Returns:
            DeriveLocaleResult summary

        Raises:
            LocaleNotFound: If either locale does not exist
            DeriveLocaleRejected: If any validation problem was found
            CodeGenerationExhausted: If unique codes could not be found
            CopySourceMissing: If a clone or copy names a missing food
            DuplicateFoodCodeError: If a concurrent run took a generated code
        """
        self._enter(
            DerivationState.VALIDATING,
            source_locale=source_locale_id,
            dest_locale=dest_locale_id,
            action_count=len(actions),
        )

        if session is not None:
            is_prototype, as_served_ids = self._validate(
                source_locale_id, dest_locale_id, actions, parse_errors, session
            )
            result = self._assign_and_commit(
                source_locale_id, dest_locale_id, actions, is_prototype, as_served_ids, session
            )
        else:
            with session_scope() as session:
                is_prototype, as_served_ids = self._validate(
                    source_locale_id, dest_locale_id, actions, parse_errors, session
                )
            with session_scope() as session:
                result = self._assign_and_commit(
                    source_locale_id, dest_locale_id, actions, is_prototype, as_served_ids, session
                )

        self._enter(
            DerivationState.DONE,
            dest_locale=dest_locale_id,
            created_count=result.created_count,
            copied_count=result.copied_count,
            included_count=result.included_count,
        )
        return result

    def derive_locale_from_file(
        self,
        path_or_stream: PathOrStream,
        format_id: str,
        source_locale_id: str,
        dest_locale_id: str,
        session: Session = None,
    ) -> DeriveLocaleResult:
        """
        Parse a locale spreadsheet and apply it.

        Raises:
            UnknownFormatError: If format_id is not registered
            DeriveLocaleRejected: If the sheet has row errors or bad references
        """
        errors, actions = parse_file(path_or_stream, format_id)

        if errors:
            logger.info(f"{len(errors)} row errors in {format_id} spreadsheet")

        return self.derive_locale(
            source_locale_id, dest_locale_id, actions, parse_errors=errors, session=session
        )
