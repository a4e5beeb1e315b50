"""
Subject API endpoints.

Routes:
- POST /subjects - Create subject
- GET /subjects - List subjects
- DELETE /subjects/{id} - Delete subject, its documents and indexed chunks

Dependencies: learnability.application.services, learnability.models
System role: Subject HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from learnability.api.deps import get_subject_service, get_tenant_id
from learnability.application.services.subject_service import SubjectService
from learnability.models.subject import SubjectCreateRequest, SubjectListResponse, SubjectResponse

from .error_handling import handle_service_errors

router = APIRouter(prefix="/subjects", tags=["subjects"])


@router.post("", response_model=SubjectResponse, status_code=status.HTTP_201_CREATED)
@handle_service_errors
async def create_subject(
    request: SubjectCreateRequest,
    tenant_id: str = Depends(get_tenant_id),
    subject_service: SubjectService = Depends(get_subject_service),
) -> SubjectResponse:
    subject = await subject_service.create_subject(
        tenant_id,
        name=request.name,
        description=request.description,
        color=request.color,
    )
    return SubjectResponse.model_validate(subject)


@router.get("", response_model=SubjectListResponse)
@handle_service_errors
async def list_subjects(
    tenant_id: str = Depends(get_tenant_id),
    subject_service: SubjectService = Depends(get_subject_service),
) -> SubjectListResponse:
    subjects = await subject_service.list_subjects(tenant_id)
    return SubjectListResponse(
        subjects=[SubjectResponse.model_validate(subject) for subject in subjects],
        total=len(subjects),
    )


@router.delete("/{subject_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_service_errors
async def delete_subject(
    subject_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    subject_service: SubjectService = Depends(get_subject_service),
) -> None:
    """Delete a subject together with its documents and indexed chunks."""
    await subject_service.delete_subject(tenant_id, subject_id)
