# agendamentos/views.py
import json
import logging
from functools import wraps

from django.http import HttpResponse, JsonResponse, QueryDict
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .exceptions import AgendaError, InvalidPayload
from .forms import AppointmentForm, ClientForm, ProfessionalForm
from .services import AppointmentManager

logger = logging.getLogger(__name__)

manager = AppointmentManager()


def read_payload(request):
    """
    Corpo da requisição como dict: JSON, ou form-encoded como alternativa.
    PUT não popula request.POST, então o corpo é lido diretamente.
    """
    if request.content_type == 'application/json':
        try:
            payload = json.loads(request.body or b'{}')
        except ValueError as exc:
            raise InvalidPayload('JSON inválido') from exc
        if not isinstance(payload, dict):
            raise InvalidPayload('JSON deve ser um objeto')
        check_json_values(payload)
        return payload
    if request.method == 'POST':
        return request.POST.dict()
    return QueryDict(request.body).dict()


def check_json_values(payload):
    # campos são escalares; objetos e listas são recusados
    for field, value in payload.items():
        if value is not None and not isinstance(value, (str, int, float, bool)):
            raise InvalidPayload('Dados inválidos', errors={
                field: [{'message': 'Valor deve ser texto ou número.', 'code': 'invalid'}],
            })


def validated(form_class, request):
    form = form_class(read_payload(request))
    if not form.is_valid():
        raise InvalidPayload('Dados inválidos', errors=form.errors.get_json_data())
    return form.cleaned_data


def error_response(exc):
    body = {'status': 'error', 'message': exc.message}
    if isinstance(exc, InvalidPayload) and exc.errors:
        body['errors'] = {
            field: [e['message'] for e in errors] for field, errors in exc.errors.items()
        }
    return JsonResponse(body, status=exc.status_code)


def handle_errors(view):
    # converte erros de agenda em JSON; qualquer outro erro segue para o Django
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except AgendaError as exc:
            return error_response(exc)
        except Exception:
            logger.exception('Erro inesperado em %s %s', request.method, request.path)
            raise
    return wrapper


def client_to_dict(client):
    return {
        'id': client.id,
        'name': client.name,
        'email': client.email,
        'phone': client.phone,
        'national_id': client.national_id,
    }


def professional_to_dict(professional):
    return {
        'id': professional.id,
        'name': professional.name,
        'specialty': professional.specialty,
        'registration': professional.registration,
    }


def appointment_to_dict(appointment):
    # visão resolvida: cliente e profissional aninhados, sem referência de volta
    return {
        'id': appointment.id,
        'scheduled_at': timezone.localtime(appointment.scheduled_at).isoformat(),
        'notes': appointment.notes,
        'client_id': appointment.client_id,
        'professional_id': appointment.professional_id,
        'client': client_to_dict(appointment.client),
        'professional': professional_to_dict(appointment.professional),
    }


def no_content():
    return HttpResponse(status=204)


# ===================================================================
# CLIENTES
# ===================================================================

@csrf_exempt
@require_http_methods(['GET', 'POST'])
@handle_errors
def clients(request):
    if request.method == 'GET':
        return JsonResponse([client_to_dict(c) for c in manager.list_clients()], safe=False)
    client = manager.create_client(**validated(ClientForm, request))
    return JsonResponse(client_to_dict(client), status=201)


@csrf_exempt
@require_http_methods(['GET', 'PUT', 'DELETE'])
@handle_errors
def client_detail(request, pk):
    if request.method == 'GET':
        return JsonResponse(client_to_dict(manager.get_client(pk)))
    if request.method == 'PUT':
        # 404 antes de validar o corpo
        manager.get_client(pk)
        client = manager.update_client(pk, **validated(ClientForm, request))
        return JsonResponse(client_to_dict(client))
    manager.delete_client(pk)
    return no_content()


# ===================================================================
# PROFISSIONAIS
# ===================================================================

@csrf_exempt
@require_http_methods(['GET', 'POST'])
@handle_errors
def professionals(request):
    if request.method == 'GET':
        return JsonResponse([professional_to_dict(p) for p in manager.list_professionals()], safe=False)
    professional = manager.create_professional(**validated(ProfessionalForm, request))
    return JsonResponse(professional_to_dict(professional), status=201)


@csrf_exempt
@require_http_methods(['GET', 'PUT', 'DELETE'])
@handle_errors
def professional_detail(request, pk):
    if request.method == 'GET':
        return JsonResponse(professional_to_dict(manager.get_professional(pk)))
    if request.method == 'PUT':
        manager.get_professional(pk)
        professional = manager.update_professional(pk, **validated(ProfessionalForm, request))
        return JsonResponse(professional_to_dict(professional))
    manager.delete_professional(pk)
    return no_content()


# ===================================================================
# AGENDAMENTOS
# ===================================================================

@csrf_exempt
@require_http_methods(['GET', 'POST'])
@handle_errors
def appointments(request):
    if request.method == 'GET':
        return JsonResponse([appointment_to_dict(a) for a in manager.list_appointments()], safe=False)
    appointment = manager.create_appointment(**validated(AppointmentForm, request))
    return JsonResponse(appointment_to_dict(appointment), status=201)


@csrf_exempt
@require_http_methods(['GET', 'PUT', 'DELETE'])
@handle_errors
def appointment_detail(request, pk):
    if request.method == 'GET':
        return JsonResponse(appointment_to_dict(manager.get_appointment(pk)))
    if request.method == 'PUT':
        manager.get_appointment(pk)
        appointment = manager.update_appointment(pk, **validated(AppointmentForm, request))
        return JsonResponse(appointment_to_dict(appointment))
    manager.delete_appointment(pk)
    return no_content()
