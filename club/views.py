from django.contrib.auth.decorators import login_required
from django.conf import settings
from django.db import connection
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST
from django_ratelimit.decorators import ratelimit as _ratelimit
import json
import logging

from .exceptions import (
    DispatchError,
    InvalidEventKindError,
    InvalidEventPayloadError,
    NotFoundError,
)
from .notifications import parse_event, send_event
from .review import gate_for_user

logger = logging.getLogger(__name__)


# define rate limit request response type and message
def ratelimit_429(request, exception):
    return JsonResponse({"detail": "Too many requests"}, status=429)

def rl_enabled():
    return bool(getattr(settings, "RATELIMIT_ENABLE", False))

def rl_deco(*args, **kwargs):
    base = _ratelimit(*args, **kwargs)
    def _wrap(fn):
        return base(fn) if rl_enabled() else fn
    return _wrap


@rl_deco(key='ip', rate='5/m', method='GET', block=False)
def healthz(request):
    """Lightweight health endpoint: returns 200 and DB ping status."""
    if getattr(request, "limited", False):
        return JsonResponse({"detail": "Too many requests"}, status=429)
    db = "ok"
    try:
        with connection.cursor() as c:
            c.execute("SELECT 1;")
            c.fetchone()
    except Exception as e:
        db = f"error: {e.__class__.__name__}"
    return JsonResponse({"status": "ok", "db": db})


# --- Push trigger ---

@csrf_exempt
@require_POST
@rl_deco(key='ip', rate='120/m', method='POST', block=False)
def send_push(request):
    """Inbound trigger: one ``{"type": ..., "data": {...}}`` event per request."""
    if getattr(request, "limited", False):
        return JsonResponse({"detail": "Too many requests"}, status=429)

    try:
        body = json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        logger.warning("[send-push] invalid JSON body")
        return JsonResponse({"error": "Invalid JSON"}, status=400)
    if not isinstance(body, dict):
        return JsonResponse({"error": "Invalid JSON"}, status=400)

    try:
        event = parse_event(body.get("type"), body.get("data"))
        outcome = send_event(event)
    except InvalidEventKindError as e:
        logger.warning("[send-push] %s", e)
        return JsonResponse({"error": "Invalid notification type"}, status=400)
    except InvalidEventPayloadError as e:
        logger.warning("[send-push] %s", e)
        return JsonResponse({"error": str(e)}, status=400)
    except NotFoundError as e:
        logger.warning("[send-push] %s", e)
        return JsonResponse({"error": str(e)}, status=404)
    except DispatchError as e:
        return JsonResponse({"error": f"Push provider error: {e}"}, status=502)
    except Exception as e:
        logger.exception("[send-push] unexpected failure")
        return JsonResponse({"error": str(e)}, status=500)

    if outcome.no_recipients:
        return JsonResponse({"error": "No valid tokens found"}, status=400)
    return JsonResponse({"success": True})


# --- Review prompt API ---

def _review_response(gate, **extra):
    record = gate.load()
    data = {"record": record.to_dict()}
    data.update(extra)
    if gate.faults:
        data["store_faults"] = [f.operation for f in gate.faults]
    return JsonResponse(data)


@login_required
@require_GET
def review_state(request):
    gate = gate_for_user(request.user)
    decision = gate.evaluate()
    return _review_response(gate, decision=str(decision), eligible=decision.eligible)


@login_required
@require_POST
def review_init(request):
    gate = gate_for_user(request.user)
    gate.initialize()
    return _review_response(gate)


@login_required
@require_POST
def review_action(request):
    gate = gate_for_user(request.user)
    gate.record_action()
    return _review_response(gate)


@login_required
@require_POST
def review_request(request):
    gate = gate_for_user(request.user)
    prompted = gate.request_review_if_appropriate()
    return _review_response(gate, prompted=prompted)


@login_required
@require_POST
def review_open_store(request):
    gate = gate_for_user(request.user)
    return _review_response(gate, prompted=gate.open_store_for_review())


@login_required
@require_POST
def review_reviewed(request):
    gate = gate_for_user(request.user)
    gate.mark_as_reviewed()
    return _review_response(gate)


@login_required
@require_POST
def review_reset(request):
    gate = gate_for_user(request.user)
    gate.reset()
    return _review_response(gate)
