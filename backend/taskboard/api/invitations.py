from uuid import UUID

from fastapi import APIRouter, Response, status

from taskboard.api.deps import CurrentUser, DbSession
from taskboard.exceptions import InvitationNotFoundError
from taskboard.schemas.invitation import InvitationPreview, InvitationResponse, InviteMemberRequest
from taskboard.schemas.member import MemberResponse
from taskboard.services import invitation_service

router = APIRouter()


@router.post(
    "/projects/{project_id}/invitations",
    response_model=InvitationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def invite_member(
    project_id: UUID,
    request: InviteMemberRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> InvitationResponse:
    """Invite someone by email. Owner or admin only."""
    invitation = await invitation_service.invite_by_email(db, project_id, current_user, request.email)
    return InvitationResponse.model_validate(invitation)


@router.post("/projects/{project_id}/invitations/public", response_model=InvitationResponse)
async def get_public_link(project_id: UUID, current_user: CurrentUser, db: DbSession) -> InvitationResponse:
    invitation = await invitation_service.get_or_create_public_link(db, project_id, current_user)
    return InvitationResponse.model_validate(invitation)


@router.get("/projects/{project_id}/invitations", response_model=list[InvitationResponse])
async def list_invitations(
    project_id: UUID, current_user: CurrentUser, db: DbSession
) -> list[InvitationResponse]:
    invitations = await invitation_service.list_project_invitations(db, project_id, current_user.id)
    return [InvitationResponse.model_validate(i) for i in invitations]


@router.delete("/invitations/{invitation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_invitation(invitation_id: UUID, current_user: CurrentUser, db: DbSession) -> Response:
    await invitation_service.cancel_invitation(db, invitation_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/invitations/{token}", response_model=InvitationPreview)
async def get_invitation(token: str, db: DbSession) -> InvitationPreview:
    """Preview an invitation. No authentication required."""
    invitation = await invitation_service.get_invitation_by_token(db, token)
    if invitation is None:
        raise InvitationNotFoundError()
    return InvitationPreview.model_validate(invitation)


@router.post("/invitations/{token}/accept", response_model=MemberResponse)
async def accept_invitation(token: str, current_user: CurrentUser, db: DbSession) -> MemberResponse:
    member = await invitation_service.accept_invitation(db, token, current_user)
    return MemberResponse.model_validate(member)


@router.post("/invitations/{token}/decline", status_code=status.HTTP_204_NO_CONTENT)
async def decline_invitation(token: str, current_user: CurrentUser, db: DbSession) -> Response:
    await invitation_service.decline_invitation(db, token, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
