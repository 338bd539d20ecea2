"""Seed data script for the Agency PM database.

Populates the database with a demo organisation, two users, a project with
memberships and a few months of advertising budget for development.
The script is idempotent: it checks for existing records before inserting.

Usage (from the repository root):
    python seed_data.py
"""

from __future__ import annotations

import os
import sys

# Ensure the package is importable when running from the repository root
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app.database import Base, SessionLocal, engine  # noqa: E402
from app.models import Organization, Project, ProjectMember, User  # noqa: E402
from app.schemas.advertising import MonthlyBudgetSave  # noqa: E402
from app.services import advertising_service  # noqa: E402
from app.utils.identifiers import new_id  # noqa: E402
from app.utils.security import hash_password  # noqa: E402

YEAR = 2024

DEMO_PASSWORD = os.environ.get("SEED_DEMO_PASSWORD", "Demo1234!")

# (month, planned, actual, media_type, notes)
_DEMO_BUDGETS: list[tuple[int, float, float, str, str]] = [
    (1, 80_000, 72_500, "digital", "Search campaign"),
    (2, 80_000, 81_200, "digital", ""),
    (3, 100_000, 120_000, "tv", "Spring spot"),
    (4, 60_000, 45_000, "magazine", ""),
    (6, 50_000, 50_000, "outdoor", "Station billboards"),
]


# ---------------------------------------------------------------------------
# Seed functions
# ---------------------------------------------------------------------------


def seed_organization(session) -> Organization:
    org = session.query(Organization).filter(Organization.slug == "demo-agency").first()
    if org is not None:
        print("  [SKIP] Organization — demo-agency already exists.")
        return org

    org = Organization(id=new_id(), name="Demo Agency", slug="demo-agency")
    session.add(org)
    session.flush()
    print(f"  [OK] Organization {org.name}")
    return org


def seed_users(session) -> tuple[User, User]:
    """Insert the demo owner and a collaborator if they do not already exist."""
    users = []
    for email, name in (
        ("owner@example.com", "Demo Owner"),
        ("member@example.com", "Demo Member"),
    ):
        user = session.query(User).filter(User.email == email).first()
        if user is None:
            user = User(
                id=new_id(),
                email=email,
                name=name,
                password_hash=hash_password(DEMO_PASSWORD),
                active=True,
            )
            session.add(user)
            print(f"  [OK] User {email}")
        else:
            print(f"  [SKIP] User {email} already exists.")
        users.append(user)
    session.flush()
    return users[0], users[1]


def seed_project(session, org: Organization, owner: User, member: User) -> Project:
    project = session.query(Project).filter(Project.slug == "spring-launch").first()
    if project is not None:
        print("  [SKIP] Project — spring-launch already exists.")
        return project

    project = Project(
        id=new_id(),
        name="Spring Launch",
        description="Product launch campaign",
        slug="spring-launch",
        status="active",
        organization_id=org.id,
        owner_id=owner.id,
    )
    session.add(project)
    session.flush()
    session.add_all([
        ProjectMember(id=new_id(), project_id=project.id, user_id=owner.id, role="owner"),
        ProjectMember(id=new_id(), project_id=project.id, user_id=member.id, role="member"),
    ])
    session.flush()
    print(f"  [OK] Project {project.name} ({project.id})")
    return project


def seed_budgets(session, project: Project, owner: User) -> None:
    """Save the demo budgets through the service so derived fields are computed."""
    for month, planned, actual, media_type, notes in _DEMO_BUDGETS:
        advertising_service.save_monthly_budget(
            session,
            MonthlyBudgetSave(
                project_id=project.id,
                year=YEAR,
                month=month,
                planned_budget=planned,
                actual_spend=actual,
                media_type=media_type,
                notes=notes,
            ),
            owner.id,
        )
    print(f"  [OK] {len(_DEMO_BUDGETS)} monthly budgets for {YEAR}")


def main() -> None:
    print("=" * 60)
    print("  Agency PM — Seed Data Script")
    print("=" * 60)

    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        print("\n[1/4] Organization...")
        org = seed_organization(session)

        print("\n[2/4] Users...")
        owner, member = seed_users(session)

        print("\n[3/4] Project...")
        project = seed_project(session, org, owner, member)
        session.commit()

        print("\n[4/4] Advertising budgets...")
        seed_budgets(session, project, owner)

        print("\n" + "=" * 60)
        print("  Seed completed.")
        print("=" * 60)

    except Exception as exc:
        session.rollback()
        print("\n[ERROR] Seed failed; rolled back.")
        print(f"  Detail: {exc}")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    main()
