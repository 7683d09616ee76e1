from __future__ import annotations

import json
from typing import Any, Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from ..container import Container
from ..events.model import ApprovalCompleted, ApprovalRejected
from .model import NewDetailPlan


def _status_for(error: DomainError) -> int:
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, AuthorizationError):
        return 403
    if isinstance(error, StateConflictError):
        return 409
    return 400


def _body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _require_int(data: dict[str, Any], key: str) -> int:
    value = data.get(key)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be an integer")


def _require_bool(data: dict[str, Any], key: str) -> bool:
    value = data.get(key)
    if not isinstance(value, bool):
        raise ValidationError(f"{key} must be true or false")
    return value


def _optional_int(data: dict[str, Any], key: str) -> Optional[int]:
    if data.get(key) is None:
        return None
    return _require_int(data, key)


def _payload_text(value: Any) -> str:
    # The approval system sends the document body either as a JSON string or inline.
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value or "")


def register(app: Flask, container: Container) -> None:
    service = container.promotion_service

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"success": False, "code": e.code, "message": str(e)}), _status_for(e)

    @app.route("/api/promotion/plan", methods=["POST"], endpoint="promotion_register_plan")
    def register_plan():
        data = _body()
        try:
            nomination_deadline = parse_iso_date(str(data.get("nominationDeadlineAt") or ""))
            appointment_date = parse_iso_date(str(data.get("appointmentAt") or ""))
        except ValueError:
            raise ValidationError("Dates must be YYYY-MM-DD")

        details = [
            NewDetailPlan(
                department_id=_require_int(d, "departmentId"),
                target_grade_id=_require_int(d, "gradeId"),
                quota_count=_require_int(d, "quotaCount"),
            )
            for d in (data.get("detailPlan") or [])
        ]
        plan_id = service.register_plan(
            plan_name=str(data.get("planName") or ""),
            nomination_deadline=nomination_deadline,
            appointment_date=appointment_date,
            plan_content=data.get("planContent"),
            details=details,
        )
        return jsonify({"success": True, "data": {"planId": plan_id}}), 201

    @app.route("/api/promotion/details/<int:detail_id>/candidates", methods=["GET"], endpoint="promotion_candidates")
    def list_candidates(detail_id: int):
        rows = [
            {
                "candidateId": c.candidate_id,
                "employeeId": c.employee_id,
                "evaluationPoint": c.evaluation_point,
                "status": c.status.value,
                "nominatorId": c.nominator_id,
                "nominationReason": c.nomination_reason,
                "comment": c.comment,
            }
            for c in service.list_candidates(detail_id=detail_id)
        ]
        return jsonify({"success": True, "data": rows})

    @app.route("/api/promotion/nominations", methods=["POST"], endpoint="promotion_nominate")
    def nominate():
        data = _body()
        service.nominate(
            nominator_id=_require_int(data, "nominatorId"),
            candidate_id=_require_int(data, "candidateId"),
            reason=str(data.get("nominationReason") or ""),
        )
        return jsonify({"success": True})

    @app.route("/api/promotion/nominations/<int:candidate_id>", methods=["DELETE"], endpoint="promotion_cancel_nomination")
    def cancel_nomination(candidate_id: int):
        data = _body()
        service.cancel_nomination(candidate_id=candidate_id, requester_id=_require_int(data, "requesterId"))
        return jsonify({"success": True})

    @app.route("/api/promotion/review", methods=["POST"], endpoint="promotion_review")
    def review():
        data = _body()
        status = service.review_candidate(
            candidate_id=_require_int(data, "candidateId"),
            is_passed=_require_bool(data, "isPassed"),
            comment=data.get("comment"),
        )
        return jsonify({"success": True, "data": {"status": status.value}})

    @app.route("/api/promotion/final-approval", methods=["POST"], endpoint="promotion_final_approval")
    def final_approval():
        data = _body()
        status = service.confirm_final_approval(
            candidate_id=_require_int(data, "candidateId"),
            is_passed=_require_bool(data, "isPassed"),
            comment=data.get("comment"),
            approved_by=_optional_int(data, "approvedBy"),
        )
        return jsonify({"success": True, "data": {"status": status.value}})

    @app.route("/api/promotion/direct", methods=["POST"], endpoint="promotion_direct")
    def direct_promotion():
        data = _body()
        history_id = service.promote_directly(
            employee_id=_require_int(data, "employeeId"),
            target_grade_id=_require_int(data, "targetGradeId"),
            reason=data.get("reason"),
            changed_by=_optional_int(data, "changedBy"),
        )
        return jsonify({"success": True, "data": {"historyId": history_id}}), 201

    @app.route("/api/approval-events/<kind>", methods=["POST"], endpoint="approval_event_intake")
    def approval_event(kind: str):
        data = _body()
        common = dict(
            doc_id=_require_int(data, "docId"),
            form_key=str(data.get("formKey") or ""),
            payload_json=_payload_text(data.get("details")),
            submitter_id=_optional_int(data, "submitterId"),
        )
        if kind == "completed":
            event = ApprovalCompleted(title=data.get("title"), **common)
        elif kind == "rejected":
            event = ApprovalRejected(comment=data.get("comment"), **common)
        else:
            return jsonify({"success": False, "message": f"Unknown event kind '{kind}'"}), 404

        outcome = container.event_bridge.dispatch(event)
        return jsonify({"success": True, "data": {"outcome": outcome.value}})
