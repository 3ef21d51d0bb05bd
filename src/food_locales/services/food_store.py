"""Food Store - bulk writes and reads of foods and their local data.

Every method takes the caller's session and never commits: the locale
derivation service runs a whole update through these calls inside one
session_scope(), so either all of it is saved or none of it.

Writes:
    create_foods, copy_foods          global food records
    create_local_foods, copy_local_foods  per-locale data (replaces existing rows)
    add_foods_to_locale               locale food list membership
    copy_categories                   per-locale category names

Reads:
    get_duplicate_codes, get_portion_size_methods, get_nutrient_table_codes,
    get_associated_foods, get_brands
"""

import logging
from typing import Dict, Iterable, List, Sequence, Set

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from food_locales.models import (
    AssociatedFood as AssociatedFoodModel,
    Brand,
    CategoryLocal,
    Food,
    FoodAttributes,
    FoodCategory,
    FoodLocalList,
    FoodNutrientMapping,
    FoodPortionSizeMethod,
    FoodPortionSizeMethodParameter,
    Locale,
    LocalFood,
)
from food_locales.models.base import new_version
from food_locales.services.dto import (
    AssociatedFood,
    CopyFood,
    CopyLocalFood,
    FoodCompositionTableReference,
    NewFood,
    NewLocalFood,
    PortionSizeMethod,
    PortionSizeMethodParameter,
)
from food_locales.services.exceptions import (
    CopySourceMissing,
    DuplicateFoodCodeError,
    LocaleNotFound,
)
from food_locales.utils.text_utils import strip_accents, truncate_description

logger = logging.getLogger(__name__)


def _unique(codes: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(codes))


class FoodStore:
    """Database access for the locale derivation engine."""

    # =========================================================================
    # Global foods
    # =========================================================================

    def get_duplicate_codes(self, candidates: Iterable[str], session: Session) -> Set[str]:
        """Return the subset of candidate codes that already exist as foods."""
        codes = _unique(candidates)
        if not codes:
            return set()

        rows = session.query(Food.code).filter(Food.code.in_(codes)).all()
        return {code for (code,) in rows}

    def _flush_new_foods(self, codes: Sequence[str], session: Session) -> None:
        try:
            session.flush()
        except IntegrityError as e:
            logger.error(f"Integrity error writing foods {', '.join(codes)}: {e}")
            raise DuplicateFoodCodeError(codes, e)

    def create_foods(self, foods: Sequence[NewFood], session: Session) -> None:
        """
        Insert new global food records with their attributes and categories.

        Args:
            foods: Foods to create
            session: Database session

        Raises:
            DuplicateFoodCodeError: If any code is already taken
        """
        if not foods:
            logger.debug("create_foods: empty list")
            return

        logger.debug(f"Writing {len(foods)} new food records to database")
        for food in sorted(foods, key=lambda f: f.code):
            logger.debug(f"{food.code} | {food.english_description}")

        session.add_all(
            Food(
                code=food.code,
                description=truncate_description(food.english_description, food.code),
                food_group_id=food.food_group_id,
                version=new_version(),
            )
            for food in foods
        )
        self._flush_new_foods([f.code for f in foods], session)

        for food in foods:
            session.add(
                FoodAttributes(
                    food_code=food.code,
                    same_as_before_option=food.attributes.same_as_before_option,
                    ready_meal_option=food.attributes.ready_meal_option,
                    reasonable_amount=food.attributes.reasonable_amount,
                    use_in_recipes=food.attributes.use_in_recipes,
                )
            )
            for category_code in food.categories:
                session.add(FoodCategory(food_code=food.code, category_code=category_code))

        session.flush()

    def copy_foods(self, copies: Sequence[CopyFood], session: Session) -> None:
        """
        Copy global food records (group, attributes, categories) to new codes.

        Raises:
            CopySourceMissing: If any source code does not exist
            DuplicateFoodCodeError: If any new code is already taken
        """
        if not copies:
            logger.debug("copy_foods: empty list")
            return

        source_codes = _unique(c.source_code for c in copies)
        sources = {
            food.code: food
            for food in session.query(Food).filter(Food.code.in_(source_codes)).all()
        }

        missing = [code for code in source_codes if code not in sources]
        if missing:
            raise CopySourceMissing(missing)

        new_foods = []
        for copy in copies:
            source = sources[copy.source_code]
            new_foods.append(
                Food(
                    code=copy.new_code,
                    description=truncate_description(copy.new_description, copy.new_code),
                    food_group_id=source.food_group_id,
                    version=new_version(),
                )
            )

        session.add_all(new_foods)
        self._flush_new_foods([c.new_code for c in copies], session)

        for copy in copies:
            source = sources[copy.source_code]

            if source.attributes is not None:
                session.add(
                    FoodAttributes(
                        food_code=copy.new_code,
                        same_as_before_option=source.attributes.same_as_before_option,
                        ready_meal_option=source.attributes.ready_meal_option,
                        reasonable_amount=source.attributes.reasonable_amount,
                        use_in_recipes=source.attributes.use_in_recipes,
                    )
                )

            for category in source.categories:
                session.add(
                    FoodCategory(food_code=copy.new_code, category_code=category.category_code)
                )

        session.flush()
        logger.debug(f"Copied {len(copies)} food records")

    # =========================================================================
    # Local food data
    # =========================================================================

    def _delete_local_data(self, codes: List[str], locale_id: str, session: Session) -> None:
        psm_ids = [
            psm_id
            for (psm_id,) in session.query(FoodPortionSizeMethod.id).filter(
                FoodPortionSizeMethod.food_code.in_(codes),
                FoodPortionSizeMethod.locale_id == locale_id,
            )
        ]
        if psm_ids:
            session.query(FoodPortionSizeMethodParameter).filter(
                FoodPortionSizeMethodParameter.portion_size_method_id.in_(psm_ids)
            ).delete(synchronize_session=False)

        for model in (FoodPortionSizeMethod, FoodNutrientMapping, AssociatedFoodModel, Brand, LocalFood):
            session.query(model).filter(
                model.food_code.in_(codes), model.locale_id == locale_id
            ).delete(synchronize_session=False)

        session.expire_all()

    def create_local_foods(
        self, foods: Sequence[NewLocalFood], locale_id: str, session: Session
    ) -> None:
        """
        Write local data for foods in one locale.

        Any existing local description, nutrient mapping, portion-size
        methods, associated foods and brands of these foods in the locale
        are replaced.

        Args:
            foods: Local data to write
            locale_id: Destination locale
            session: Database session
        """
        if not foods:
            logger.debug("create_local_foods: empty list")
            return

        self._delete_local_data(_unique(f.code for f in foods), locale_id, session)

        for food in foods:
            session.add(
                LocalFood(
                    food_code=food.code,
                    locale_id=locale_id,
                    local_description=truncate_description(food.local_description, food.code),
                    simple_local_description=truncate_description(
                        strip_accents(food.local_description), food.code
                    ),
                    version=new_version(),
                )
            )

            for ref in food.nutrient_table_codes:
                session.add(
                    FoodNutrientMapping(
                        food_code=food.code,
                        locale_id=locale_id,
                        nutrient_table_id=ref.table_id,
                        nutrient_table_record_id=ref.record_id,
                    )
                )

            for method in food.portion_size_methods:
                session.add(
                    FoodPortionSizeMethod(
                        food_code=food.code,
                        locale_id=locale_id,
                        method=method.method,
                        description=method.description,
                        image_url=method.image_url,
                        use_for_recipes=method.use_for_recipes,
                        conversion_factor=method.conversion_factor,
                        parameters=[
                            FoodPortionSizeMethodParameter(name=p.name, value=p.value)
                            for p in method.parameters
                        ],
                    )
                )

            for assoc in food.associated_foods:
                session.add(
                    AssociatedFoodModel(
                        food_code=food.code,
                        locale_id=locale_id,
                        associated_food_code=assoc.food_code,
                        associated_category_code=assoc.category_code,
                        text=assoc.prompt_text,
                        link_as_main=assoc.link_as_main,
                        generic_name=assoc.generic_name,
                    )
                )

            for name in food.brand_names:
                session.add(Brand(food_code=food.code, locale_id=locale_id, name=name))

        session.flush()
        logger.debug(f"Wrote local data for {len(foods)} foods in {locale_id}")

    def copy_local_foods(
        self,
        source_locale_id: str,
        dest_locale_id: str,
        copies: Sequence[CopyLocalFood],
        session: Session,
    ) -> None:
        """
        Copy local data from the source locale to the destination locale.

        Nutrient mapping, portion-size methods, associated foods and brands
        are copied verbatim; the local description comes from each request.
        A request with fct_reference replaces the copied nutrient mapping.
        A source food mapped to more than one FCT record is copied as is, with
        a warning; readers use the first record.
        """
        if not copies:
            logger.debug("copy_local_foods: empty list")
            return

        source_codes = _unique(c.source_code for c in copies)

        methods = self.get_portion_size_methods(source_codes, source_locale_id, session)
        associated = self.get_associated_foods(source_codes, source_locale_id, session)
        brands = self.get_brands(source_codes, source_locale_id, session)
        mappings = self.get_nutrient_table_codes(source_codes, source_locale_id, session)

        new_local_foods = []
        for copy in copies:
            if copy.fct_reference is not None:
                nutrient_codes = (copy.fct_reference,)
            else:
                nutrient_codes = tuple(mappings[copy.source_code])
                if len(nutrient_codes) > 1:
                    first = nutrient_codes[0]
                    logger.warning(
                        f"More than one food composition record for {copy.source_code} in "
                        f"{source_locale_id}, {first.table_id}/{first.record_id} takes precedence"
                    )

            new_local_foods.append(
                NewLocalFood(
                    code=copy.dest_code,
                    local_description=copy.local_description,
                    nutrient_table_codes=nutrient_codes,
                    portion_size_methods=tuple(methods[copy.source_code]),
                    associated_foods=tuple(associated[copy.source_code]),
                    brand_names=tuple(brands[copy.source_code]),
                )
            )

        self.create_local_foods(new_local_foods, dest_locale_id, session)

    def add_foods_to_locale(self, codes: Iterable[str], locale_id: str, session: Session) -> int:
        """
        Add foods to a locale's food list, skipping foods already listed.

        Returns:
            Number of foods added
        """
        unique_codes = _unique(codes)
        if not unique_codes:
            logger.debug("add_foods_to_locale: empty list")
            return 0

        existing = {
            code
            for (code,) in session.query(FoodLocalList.food_code).filter(
                FoodLocalList.locale_id == locale_id,
                FoodLocalList.food_code.in_(unique_codes),
            )
        }

        added = [code for code in unique_codes if code not in existing]
        session.add_all(FoodLocalList(locale_id=locale_id, food_code=code) for code in added)
        session.flush()

        return len(added)

    def copy_categories(self, source_locale_id: str, dest_locale_id: str, session: Session) -> int:
        """
        Copy local category names from one locale to another.

        Categories that already have a name in the destination keep it.

        Returns:
            Number of category names copied

        Raises:
            LocaleNotFound: If either locale does not exist
        """
        for locale_id in (source_locale_id, dest_locale_id):
            if session.get(Locale, locale_id) is None:
                raise LocaleNotFound(locale_id)

        existing = {
            code
            for (code,) in session.query(CategoryLocal.category_code).filter(
                CategoryLocal.locale_id == dest_locale_id
            )
        }

        source_rows = (
            session.query(CategoryLocal)
            .filter(CategoryLocal.locale_id == source_locale_id)
            .order_by(CategoryLocal.category_code)
            .all()
        )

        copied = 0
        for row in source_rows:
            if row.category_code in existing:
                continue
            session.add(
                CategoryLocal(
                    category_code=row.category_code,
                    locale_id=dest_locale_id,
                    local_description=row.local_description,
                    simple_local_description=row.simple_local_description,
                    version=new_version(),
                )
            )
            copied += 1

        session.flush()
        return copied

    # =========================================================================
    # Local food reads
    # =========================================================================

    def get_portion_size_methods(
        self, codes: Sequence[str], locale_id: str, session: Session
    ) -> Dict[str, List[PortionSizeMethod]]:
        """Portion-size methods per food, in id order; every code gets an entry."""
        result: Dict[str, List[PortionSizeMethod]] = {code: [] for code in codes}
        if not codes:
            return result

        rows = (
            session.query(FoodPortionSizeMethod)
            .filter(
                FoodPortionSizeMethod.food_code.in_(list(codes)),
                FoodPortionSizeMethod.locale_id == locale_id,
            )
            .order_by(FoodPortionSizeMethod.id)
            .all()
        )

        for row in rows:
            result[row.food_code].append(
                PortionSizeMethod(
                    method=row.method,
                    description=row.description,
                    image_url=row.image_url,
                    use_for_recipes=row.use_for_recipes,
                    conversion_factor=row.conversion_factor,
                    parameters=tuple(
                        PortionSizeMethodParameter(p.name, p.value) for p in row.parameters
                    ),
                )
            )

        return result

    def get_nutrient_table_codes(
        self, codes: Sequence[str], locale_id: str, session: Session
    ) -> Dict[str, List[FoodCompositionTableReference]]:
        """Nutrient mapping per food; every code gets an entry."""
        result: Dict[str, List[FoodCompositionTableReference]] = {code: [] for code in codes}
        if not codes:
            return result

        rows = (
            session.query(FoodNutrientMapping)
            .filter(
                FoodNutrientMapping.food_code.in_(list(codes)),
                FoodNutrientMapping.locale_id == locale_id,
            )
            .order_by(FoodNutrientMapping.id)
            .all()
        )

        for row in rows:
            result[row.food_code].append(
                FoodCompositionTableReference(row.nutrient_table_id, row.nutrient_table_record_id)
            )

        return result

    def get_associated_foods(
        self, codes: Sequence[str], locale_id: str, session: Session
    ) -> Dict[str, List[AssociatedFood]]:
        """Associated food prompts per food; every code gets an entry."""
        result: Dict[str, List[AssociatedFood]] = {code: [] for code in codes}
        if not codes:
            return result

        rows = (
            session.query(AssociatedFoodModel)
            .filter(
                AssociatedFoodModel.food_code.in_(list(codes)),
                AssociatedFoodModel.locale_id == locale_id,
            )
            .order_by(AssociatedFoodModel.id)
            .all()
        )

        for row in rows:
            result[row.food_code].append(
                AssociatedFood(
                    prompt_text=row.text,
                    link_as_main=row.link_as_main,
                    generic_name=row.generic_name,
                    food_code=row.associated_food_code,
                    category_code=row.associated_category_code,
                )
            )

        return result

    def get_brands(self, codes: Sequence[str], locale_id: str, session: Session) -> Dict[str, List[str]]:
        """Brand names per food; every code gets an entry."""
        result: Dict[str, List[str]] = {code: [] for code in codes}
        if not codes:
            return result

        rows = (
            session.query(Brand.food_code, Brand.name)
            .filter(Brand.food_code.in_(list(codes)), Brand.locale_id == locale_id)
            .order_by(Brand.id)
            .all()
        )

        for food_code, name in rows:
            result[food_code].append(name)

        return result
