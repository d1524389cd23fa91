"""Meal plan service"""

import logging
from datetime import date
from typing import Iterable, List, Optional, Tuple, Union
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.context import RequestContext, SYSTEM_CONTEXT
from app.exceptions import NotFoundError, ServiceValidationError
from domain.enums import PlanType
from domain.models import MealPlan, MealPlanMeal
from repositories import MealPlanMealRepository, MealPlanRepository, SchoolMealPriceRepository
from services import plan_builder
from services.catalog_service import CatalogService
from services.monthly_assignor import MonthlyAssignments, assignments_from_entries, apply_all, AddDate, SetMeal
from services.plan_builder import PlanMeta, ResolvedMealPlanEntry
from services.weekly_scheduler import WeeklySchedule, schedule_from_entries

logger = logging.getLogger("schoolmeals.meal_plans")

Draft = Union[WeeklySchedule, MonthlyAssignments]


def _to_rows(entries: Iterable[ResolvedMealPlanEntry]) -> List[MealPlanMeal]:
    return [
        MealPlanMeal(
            meal_id=e.meal_id,
            day_of_week=e.day_of_week,
            meal_date=e.meal_date,
            category=e.category,
            price=e.price,
            base_price=e.base_price,
            school_price=e.school_price,
            order=e.order,
        )
        for e in entries
    ]


def _plan_meta(plan: MealPlan) -> PlanMeta:
    return PlanMeta(
        school_id=plan.school_id,
        start_date=plan.start_date,
        end_date=plan.end_date,
        plan_type=PlanType(plan.plan_type),
    )


class MealPlanService:
    """
    Meal plans per school:
    - builds resolved entries from weekly slots or dated assignments
    - persists plans with their entries
    - assigns meals to dates on existing monthly plans
    """

    @staticmethod
    def _pricing_inputs(db: Session, school_id: Optional[int]):
        if not school_id:
            return [], []
        catalog = CatalogService.plannable_meals(db, school_id)
        overrides = SchoolMealPriceRepository(db).list_for_school(school_id)
        return catalog, overrides

    @staticmethod
    def preview(db: Session, meta: PlanMeta, draft: Draft) -> List[ResolvedMealPlanEntry]:
        """Build the entries a save would persist, without writing anything."""
        catalog, overrides = MealPlanService._pricing_inputs(db, meta.school_id)
        return plan_builder.build(meta, draft, catalog, overrides)

    @staticmethod
    def create_plan(
        db: Session, meta: PlanMeta, draft: Draft, ctx: RequestContext = SYSTEM_CONTEXT
    ) -> MealPlan:
        entries = MealPlanService.preview(db, meta, draft)
        plan = MealPlan(
            school_id=meta.school_id,
            start_date=meta.start_date,
            end_date=meta.end_date,
            plan_type=PlanType(meta.plan_type).value,
            status=meta.status.value,
        )
        plan.meals.extend(_to_rows(entries))
        try:
            db.add(plan)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to create meal plan for school %s", meta.school_id)
            raise
        db.refresh(plan)
        logger.info(
            "Created %s plan %s for school %s (%d meals) by %s",
            plan.plan_type, plan.plan_id, plan.school_id, len(entries), ctx.actor,
        )
        return plan

    @staticmethod
    def update_plan(
        db: Session,
        plan_id: int,
        meta: PlanMeta,
        draft: Draft,
        ctx: RequestContext = SYSTEM_CONTEXT,
    ) -> MealPlan:
        repo = MealPlanRepository(db)
        plan = repo.get_by_id(plan_id)
        if plan is None:
            raise NotFoundError(f"Meal plan {plan_id} not found")

        entries = MealPlanService.preview(db, meta, draft)
        try:
            plan.school_id = meta.school_id
            plan.start_date = meta.start_date
            plan.end_date = meta.end_date
            plan.plan_type = PlanType(meta.plan_type).value
            plan.status = meta.status.value
            repo.replace_meals(plan, _to_rows(entries))
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to update meal plan %s", plan_id)
            raise
        db.refresh(plan)
        logger.info("Updated plan %s (%d meals) by %s", plan_id, len(entries), ctx.actor)
        return plan

    @staticmethod
    def assign_dates(
        db: Session,
        plan_id: int,
        assignments: Iterable[Tuple[int, date]],
        ctx: RequestContext = SYSTEM_CONTEXT,
    ) -> MealPlan:
        """
        Assign meals to dates of a monthly plan.

        New dates are added and already assigned dates are overwritten; other
        dates keep their stored meal and price. Only the incoming assignments
        are checked against the catalog and priced, and every one of them must
        fall inside the plan period.
        """
        repo = MealPlanRepository(db)
        plan = repo.get_by_id(plan_id)
        if plan is None:
            raise NotFoundError(f"Meal plan {plan_id} not found")
        if plan.plan_type != PlanType.MONTHLY.value:
            raise ServiceValidationError(
                "Meals can only be assigned to dates on monthly plans",
                details={"plan_id": plan_id, "plan_type": plan.plan_type},
                code="NOT_MONTHLY_PLAN",
            )

        operations = []
        for meal_id, meal_date in assignments:
            operations.append(AddDate(meal_date=meal_date))
            operations.append(SetMeal(meal_date=meal_date, meal_id=meal_id))
        incoming = apply_all(MonthlyAssignments(), operations)

        catalog, overrides = MealPlanService._pricing_inputs(db, plan.school_id)
        entries = plan_builder.build_date_entries(_plan_meta(plan), incoming, catalog, overrides)
        try:
            MealPlanMealRepository(db).remove_dates(plan, (e.meal_date for e in entries))
            plan.meals.extend(_to_rows(entries))
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to assign dates on plan %s", plan_id)
            raise
        db.refresh(plan)
        logger.info(
            "Assigned %d dates on plan %s by %s", len(entries), plan_id, ctx.actor
        )
        return plan

    @staticmethod
    def list_plans(db: Session, school_id: Optional[int] = None) -> List[MealPlan]:
        return MealPlanRepository(db).list_plans(school_id=school_id)

    @staticmethod
    def get_plan(db: Session, plan_id: int) -> MealPlan:
        plan = MealPlanRepository(db).get_by_id(plan_id)
        if plan is None:
            raise NotFoundError(f"Meal plan {plan_id} not found")
        return plan

    @staticmethod
    def delete_plan(db: Session, plan_id: int, ctx: RequestContext = SYSTEM_CONTEXT) -> None:
        if not MealPlanRepository(db).delete(plan_id):
            raise NotFoundError(f"Meal plan {plan_id} not found")
        logger.info("Deleted plan %s by %s", plan_id, ctx.actor)

    @staticmethod
    def editable_draft(db: Session, plan_id: int) -> Draft:
        """Stored plan entries turned back into the weekly slots or date assignments they came from."""
        plan = MealPlanService.get_plan(db, plan_id)
        if plan.plan_type == PlanType.MONTHLY.value:
            return assignments_from_entries(plan.meals)
        return schedule_from_entries(plan.meals)

    @staticmethod
    def requires_date_assignment(plan: MealPlan) -> bool:
        return plan_builder.requires_date_assignment(_plan_meta(plan))
