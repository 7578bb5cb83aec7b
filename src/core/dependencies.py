"""Dependency injection module for FastAPI.

This module builds request-scoped managers from the Database handle, clock
and credential verifier that the application factory attaches to
``app.state``. Tests swap the clock through ``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from core.database import get_db
from core.security import CredentialVerifier
from utils import auth_manager
from utils import code_issuer
from utils import directory_manager
from utils import enrollment_manager
from utils import redemption_engine
from utils.time_utils import Clock, now_ms


def get_clock() -> Clock:
    """Get the clock used to timestamp codes and attendance."""
    return now_ms


def get_credential_verifier(request: Request) -> CredentialVerifier:
    """Get the CredentialVerifier configured for this application."""
    return request.app.state.credential_verifier


def get_code_issuer(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> code_issuer.CodeIssuer:
    """Get CodeIssuer instance with request-scoped DB session.

    Args:
        db: Database session.
        clock: Millisecond clock.

    Returns:
        CodeIssuer instance.
    """
    return code_issuer.CodeIssuer(db, clock=clock)


def get_redemption_engine(
    request: Request,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> redemption_engine.RedemptionEngine:
    """Get RedemptionEngine instance with request-scoped DB session.

    Args:
        request: Current request, used to read the enrollment policy.
        db: Database session.
        clock: Millisecond clock.

    Returns:
        RedemptionEngine instance.
    """
    return redemption_engine.RedemptionEngine(
        db,
        clock=clock,
        require_enrollment=request.app.state.require_enrollment,
    )


def get_enrollment_manager(
    db: Session = Depends(get_db),
) -> enrollment_manager.EnrollmentManager:
    """Get EnrollmentManager instance with request-scoped DB session."""
    return enrollment_manager.EnrollmentManager(db)


def get_directory_manager(
    db: Session = Depends(get_db),
    verifier: CredentialVerifier = Depends(get_credential_verifier),
) -> directory_manager.DirectoryManager:
    """Get DirectoryManager instance with request-scoped DB session."""
    return directory_manager.DirectoryManager(db, verifier=verifier)


def get_auth_manager(
    db: Session = Depends(get_db),
    verifier: CredentialVerifier = Depends(get_credential_verifier),
) -> auth_manager.AuthManager:
    """Get AuthManager instance with request-scoped DB session."""
    return auth_manager.AuthManager(db, verifier=verifier)


# Type aliases for dependency injection
CodeIssuerDep = Annotated[code_issuer.CodeIssuer, Depends(get_code_issuer)]
RedemptionEngineDep = Annotated[
    redemption_engine.RedemptionEngine, Depends(get_redemption_engine)
]
EnrollmentManagerDep = Annotated[
    enrollment_manager.EnrollmentManager, Depends(get_enrollment_manager)
]
DirectoryManagerDep = Annotated[
    directory_manager.DirectoryManager, Depends(get_directory_manager)
]
AuthManagerDep = Annotated[auth_manager.AuthManager, Depends(get_auth_manager)]
