"""
Regras de negócio da agenda.

Toda escrita de clientes, profissionais e agendamentos passa pelo
AppointmentManager; as views apenas convertem requisições e respostas.
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError
from django.utils import timezone

from .exceptions import InvalidReference, NotFound, ReferenceInUse, SchedulingConflict
from .models import Appointment, Client, Professional

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = 'Profissional já possui agendamento neste horário.'


def make_aware_if_naive(dt):
    """
    Recebe um datetime e retorna um aware datetime usando timezone.get_current_timezone()
    se o datetime for naive. Se já for aware, retorna como está.
    """
    if timezone.is_naive(dt):
        return timezone.make_aware(dt, timezone.get_current_timezone())
    return dt


def is_conflicting(professional_id, scheduled_at, exclude_id=None):
    # igualdade exata do instante; não há noção de duração
    qs = Appointment.objects.filter(professional_id=professional_id, scheduled_at=scheduled_at)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.exists()


class AppointmentManager:
    """
    Service para clientes, profissionais e agendamentos.

    Garante, antes de gravar um agendamento, que cliente e profissional
    existem e que o profissional não tem outro agendamento no mesmo
    instante. A verificação e a escrita rodam na mesma transação, e a
    constraint única (professional, scheduled_at) do banco é a garantia
    final contra gravações concorrentes.
    """

    @staticmethod
    def _get(queryset, pk, label):
        obj = queryset.filter(pk=pk).first()
        if obj is None:
            raise NotFound(f'{label} {pk} não encontrado.')
        return obj

    @staticmethod
    def _resolve(queryset, pk, label):
        obj = queryset.filter(pk=pk).first()
        if obj is None:
            logger.warning('Referência inválida: %s %s', label, pk)
            raise InvalidReference(f'{label} {pk} inválido.')
        return obj

    @staticmethod
    def _delete_protected(obj, label):
        try:
            with transaction.atomic():
                obj.delete()
        except ProtectedError as exc:
            logger.warning('%s %s possui agendamentos; remoção recusada', label, obj.pk)
            raise ReferenceInUse(f'{label} {obj.pk} possui agendamentos.') from exc

    # ------------------------------------------------------------------
    # Clientes
    # ------------------------------------------------------------------

    def list_clients(self):
        return list(Client.objects.order_by('id'))

    def get_client(self, pk):
        return self._get(Client.objects, pk, 'Cliente')

    def create_client(self, name, email, phone, national_id):
        client = Client.objects.create(name=name, email=email, phone=phone, national_id=national_id)
        logger.info('Cliente #%s criado', client.pk)
        return client

    def update_client(self, pk, name, email, phone, national_id):
        with transaction.atomic():
            client = self._get(Client.objects.select_for_update(), pk, 'Cliente')
            client.name = name
            client.email = email
            client.phone = phone
            client.national_id = national_id
            client.save()
        logger.info('Cliente #%s atualizado', client.pk)
        return client

    def delete_client(self, pk):
        client = self.get_client(pk)
        self._delete_protected(client, 'Cliente')
        logger.info('Cliente #%s removido', pk)

    # ------------------------------------------------------------------
    # Profissionais
    # ------------------------------------------------------------------

    def list_professionals(self):
        return list(Professional.objects.order_by('id'))

    def get_professional(self, pk):
        return self._get(Professional.objects, pk, 'Profissional')

    def create_professional(self, name, specialty, registration):
        professional = Professional.objects.create(name=name, specialty=specialty, registration=registration)
        logger.info('Profissional #%s criado', professional.pk)
        return professional

    def update_professional(self, pk, name, specialty, registration):
        with transaction.atomic():
            professional = self._get(Professional.objects.select_for_update(), pk, 'Profissional')
            professional.name = name
            professional.specialty = specialty
            professional.registration = registration
            professional.save()
        logger.info('Profissional #%s atualizado', professional.pk)
        return professional

    def delete_professional(self, pk):
        professional = self.get_professional(pk)
        self._delete_protected(professional, 'Profissional')
        logger.info('Profissional #%s removido', pk)

    # ------------------------------------------------------------------
    # Agendamentos
    # ------------------------------------------------------------------

    def list_appointments(self):
        """Agendamentos com cliente e profissional já carregados, por horário."""
        return list(
            Appointment.objects.select_related('client', 'professional').order_by('scheduled_at', 'id')
        )

    def get_appointment(self, pk):
        return self._get(Appointment.objects.select_related('client', 'professional'), pk, 'Agendamento')

    def create_appointment(self, client_id, professional_id, scheduled_at, notes=''):
        """
        Cria um agendamento.

        Args:
            client_id: id do cliente
            professional_id: id do profissional
            scheduled_at: data e hora da consulta (naive é tratado no fuso atual)
            notes: observações opcionais

        Returns:
            Appointment criado

        Raises:
            InvalidReference: cliente ou profissional inexistente
            SchedulingConflict: profissional já ocupado no horário
        """
        scheduled_at = make_aware_if_naive(scheduled_at)
        try:
            with transaction.atomic():
                client = self._resolve(Client.objects, client_id, 'Cliente')
                # trava o profissional para serializar agendamentos concorrentes
                professional = self._resolve(Professional.objects.select_for_update(), professional_id, 'Profissional')
                if is_conflicting(professional.pk, scheduled_at):
                    raise self._conflict(professional.pk, scheduled_at)
                appointment = Appointment.objects.create(
                    client=client,
                    professional=professional,
                    scheduled_at=scheduled_at,
                    notes=notes or '',
                )
        except IntegrityError as exc:
            # outra transação gravou o mesmo horário entre a checagem e o insert
            if not is_conflicting(professional_id, scheduled_at):
                raise
            raise self._conflict(professional_id, scheduled_at) from exc

        logger.info(
            'Agendamento #%s criado: profissional #%s em %s',
            appointment.pk, professional.pk, scheduled_at.isoformat(),
        )
        return appointment

    def update_appointment(self, pk, client_id, professional_id, scheduled_at, notes=''):
        """
        Substitui cliente, profissional, horário e observações de um agendamento.

        As mesmas validações da criação são refeitas com os novos valores,
        ignorando o próprio agendamento na checagem de conflito. Em caso de
        erro o registro gravado não é alterado.
        """
        scheduled_at = make_aware_if_naive(scheduled_at)
        try:
            with transaction.atomic():
                appointment = self._get(Appointment.objects.select_for_update(), pk, 'Agendamento')
                client = self._resolve(Client.objects, client_id, 'Cliente')
                professional = self._resolve(Professional.objects.select_for_update(), professional_id, 'Profissional')
                if is_conflicting(professional.pk, scheduled_at, exclude_id=appointment.pk):
                    raise self._conflict(professional.pk, scheduled_at)
                appointment.client = client
                appointment.professional = professional
                appointment.scheduled_at = scheduled_at
                appointment.notes = notes or ''
                appointment.save()
        except IntegrityError as exc:
            if not is_conflicting(professional_id, scheduled_at, exclude_id=pk):
                raise
            raise self._conflict(professional_id, scheduled_at) from exc

        logger.info('Agendamento #%s atualizado', appointment.pk)
        return appointment

    def delete_appointment(self, pk):
        appointment = self._get(Appointment.objects, pk, 'Agendamento')
        appointment.delete()
        logger.info('Agendamento #%s removido', pk)

    @staticmethod
    def _conflict(professional_id, scheduled_at):
        logger.warning(
            'Conflito de horário: profissional #%s já ocupado em %s',
            professional_id, scheduled_at.isoformat(),
        )
        return SchedulingConflict(CONFLICT_MESSAGE)
