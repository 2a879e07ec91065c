"""Form repository - Database operations for forms and their submissions"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Form, FormSubmission


class FormRepository:
    """Repository for form database operations"""

    @staticmethod
    def get_forms(db: Session, workspace_id: str) -> list[Form]:
        return (
            db.query(Form)
            .filter(Form.workspace_id == workspace_id, Form.is_active.is_(True))
            .order_by(Form.created_at.desc())
            .all()
        )

    @staticmethod
    def get_form(db: Session, form_id: str, workspace_id: str) -> Optional[Form]:
        return db.query(Form).filter(Form.id == form_id, Form.workspace_id == workspace_id).first()

    @staticmethod
    def create_form(db: Session, workspace_id: str, **data) -> Form:
        form = Form(workspace_id=workspace_id, **data)
        db.add(form)
        db.commit()
        db.refresh(form)
        return form

    @staticmethod
    def update_form(db: Session, form: Form, **updates) -> Form:
        for key, value in updates.items():
            if value is not None and hasattr(form, key):
                setattr(form, key, value)
        db.commit()
        db.refresh(form)
        return form

    # ------------------------------------------------------------------
    # Submissions
    # ------------------------------------------------------------------

    @staticmethod
    def create_submission(db: Session, workspace_id: str, **data) -> FormSubmission:
        submission = FormSubmission(workspace_id=workspace_id, status="PENDING", **data)
        db.add(submission)
        db.commit()
        db.refresh(submission)
        return submission

    @staticmethod
    def get_submission(db: Session, submission_id: str) -> Optional[FormSubmission]:
        """Unscoped lookup for the public submit link"""
        return (
            db.query(FormSubmission)
            .options(joinedload(FormSubmission.form))
            .filter(FormSubmission.id == submission_id)
            .first()
        )

    @staticmethod
    def search_submissions(
        db: Session,
        workspace_id: str,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[FormSubmission], int]:
        query = db.query(FormSubmission).filter(FormSubmission.workspace_id == workspace_id)
        if status:
            query = query.filter(FormSubmission.status == status)

        total = query.count()
        submissions = (
            query.options(joinedload(FormSubmission.form))
            .order_by(FormSubmission.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return submissions, total

    @staticmethod
    def find_overdue_submissions(db: Session, now: datetime, workspace_id: Optional[str] = None) -> list[FormSubmission]:
        """PENDING submissions whose due date has passed"""
        query = db.query(FormSubmission).filter(
            FormSubmission.status == "PENDING",
            FormSubmission.due_date.isnot(None),
            FormSubmission.due_date < now,
        )
        if workspace_id:
            query = query.filter(FormSubmission.workspace_id == workspace_id)
        return query.all()
