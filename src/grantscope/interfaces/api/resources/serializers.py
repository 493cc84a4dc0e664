"""JSON media for inspector snapshots."""

from typing import Any

from grantscope.application.dto.snapshots import (
    FieldGrantsView,
    Notice,
    ObjectGrantsView,
    SessionSnapshot,
)
from grantscope.application.services.search_gate import SearchDecision
from grantscope.domain.entities import MergedGrant, RemediationRecord


def grant_media(grant: MergedGrant, field_level: bool = False) -> dict[str, Any]:
    media: dict[str, Any] = {
        "key": grant.key,
        "object": grant.object_label,
        "object_name": grant.object_name,
        "source_type": str(grant.source_type),
        "source_name": grant.source_name,
        "sources": list(grant.sources),
        "assigned_by": grant.assigned_by,
        "assignment_method": grant.assignment_method,
        "read": grant.can_read,
        "edit": grant.can_edit,
    }
    if field_level:
        media["field"] = grant.field_name
    else:
        media["create"] = grant.can_create
        media["delete"] = grant.can_delete
    return media


def objects_media(view: ObjectGrantsView) -> dict[str, Any]:
    return {
        "items": [grant_media(g) for g in view.grants],
        "term": view.term,
        "page": view.page_index,
        "page_size": view.page_size,
        "total": view.server_total,
        "page_info": view.page_info,
        "is_first_page": view.is_first_page,
        "is_last_page": view.is_last_page,
        "is_truncated": view.is_truncated,
    }


def fields_media(view: FieldGrantsView) -> dict[str, Any]:
    return {
        "items": [grant_media(g, field_level=True) for g in view.grants],
        "term": view.term,
        "page": view.page_index,
        "page_size": view.page_size,
        "buffered": view.buffered,
        "has_more": view.has_more,
        "page_info": view.page_info,
        "is_first_page": view.is_first_page,
        "is_last_page": view.is_last_page,
    }


def notice_media(notice: Notice) -> dict[str, str]:
    return {"level": str(notice.level), "title": notice.title, "message": notice.message}


def decision_media(decision: SearchDecision) -> dict[str, Any]:
    media: dict[str, Any] = {"accepted": decision.accepted, "term": decision.term}
    if not decision.accepted:
        media["reason"] = decision.reason
    return media


def record_media(record: RemediationRecord) -> dict[str, Any]:
    return {
        "action": str(record.action_type),
        "user_id": record.target_user_id,
        "applied_at": record.applied_at.isoformat(),
        "undoable": record.undoable,
    }


def snapshot_media(snapshot: SessionSnapshot, notices: tuple[Notice, ...] = ()) -> dict[str, Any]:
    user = snapshot.user
    risk = snapshot.risk
    remediation = snapshot.remediation
    return {
        "user_id": snapshot.user_id,
        "user": {
            "name": user.user_name,
            "email": user.email,
            "profile": user.profile_name,
            "status": user.status_label,
            "permission_sets": list(user.permission_sets),
        }
        if user
        else None,
        "risk": {
            "high_risk_count": risk.high_risk_count,
            "score": risk.risk_score,
            "level": risk.risk_level,
            "critical_findings": list(risk.critical_findings),
        },
        "total_permissions": snapshot.total_permissions,
        "objects": objects_media(snapshot.objects),
        "fields": fields_media(snapshot.fields),
        "system_permissions": [
            {"permission": p.label, "status": p.status} for p in snapshot.system_permissions
        ],
        "sharing_rules": [
            {
                "object": r.object_name,
                "sharing_type": r.sharing_type,
                "access_level": r.access_level,
                "shared_with": r.shared_with,
            }
            for r in snapshot.sharing_rules
        ],
        "role_hierarchy": [
            {"role": r.role_name, "parent_role": r.parent_role, "access_level": r.access_level}
            for r in snapshot.role_hierarchy
        ],
        "visible_sections": sorted(str(s) for s in snapshot.visible_sections),
        "remediation": {
            "undoable_action": str(remediation.undoable_action)
            if remediation.undoable_action
            else None,
            "user_id": remediation.target_user_id,
            "applied_at": remediation.applied_at.isoformat() if remediation.applied_at else None,
        },
        "notices": [notice_media(n) for n in notices],
    }
