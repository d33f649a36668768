"""Read path for QA check definitions (the Check Definition Store)."""

from sqlalchemy import select

from qa_kernel.domain.checks import CheckDefinition
from qa_kernel.models.check_definition import QACheckDefinitionModel
from qa_kernel.selectors.base import BaseSelector


class CheckDefinitionSelector(BaseSelector):
    """Lists check definitions in evaluation order."""

    def list_definitions(
        self,
        entity_type: str | None = "material",
        active_only: bool = True,
    ) -> tuple[CheckDefinition, ...]:
        """Definitions for ``entity_type`` ordered by sort_order, then key.

        Args:
            entity_type: Restrict to one entity type; None returns all.
            active_only: Exclude deactivated definitions.
        """
        stmt = select(QACheckDefinitionModel)
        if entity_type is not None:
            stmt = stmt.where(QACheckDefinitionModel.entity_type == entity_type)
        if active_only:
            stmt = stmt.where(QACheckDefinitionModel.is_active == True)  # noqa: E712
        stmt = stmt.order_by(
            QACheckDefinitionModel.sort_order,
            QACheckDefinitionModel.check_key,
        )
        rows = self.session.execute(stmt).scalars().all()
        return tuple(row.to_dto() for row in rows)

    def get_definition(self, check_key: str) -> CheckDefinition | None:
        row = self.session.execute(
            select(QACheckDefinitionModel).where(
                QACheckDefinitionModel.check_key == check_key,
            )
        ).scalar_one_or_none()
        return row.to_dto() if row is not None else None
