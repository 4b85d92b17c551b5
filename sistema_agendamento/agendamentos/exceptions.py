from http import HTTPStatus


class AgendaError(Exception):
    """
    Erro esperado de uma operação de agenda.

    O chamador decide como apresentar o erro; `status_code` é a sugestão
    usada pelas views HTTP.
    """

    status_code = HTTPStatus.BAD_REQUEST

    def __init__(self, message, status_code=None):
        if status_code is not None:
            self.status_code = status_code
        self.message = message
        super().__init__(message)


class NotFound(AgendaError):
    status_code = HTTPStatus.NOT_FOUND


class InvalidReference(AgendaError):
    """Cliente ou profissional informado não existe."""


class SchedulingConflict(AgendaError):
    """Profissional já possui agendamento no mesmo horário."""


class ReferenceInUse(AgendaError):
    """Cliente ou profissional ainda possui agendamentos."""

    status_code = HTTPStatus.CONFLICT


class InvalidPayload(AgendaError):

    def __init__(self, message, errors=None):
        self.errors = errors or {}
        super().__init__(message)
