from django.db import models


class Client(models.Model):
    name = models.CharField(max_length=120)
    email = models.EmailField()
    phone = models.CharField(max_length=30)
    # CPF; esperado único por cliente, mas não validado aqui
    national_id = models.CharField(max_length=20)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return self.name


class Professional(models.Model):
    name = models.CharField(max_length=120)
    specialty = models.CharField(max_length=120)  # ex: Ortodontia, Endodontia
    registration = models.CharField(max_length=30)  # registro profissional (CRO)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.name} ({self.specialty})"


class Appointment(models.Model):
    scheduled_at = models.DateTimeField()
    notes = models.TextField(blank=True)
    # PROTECT: cliente/profissional com agendamentos não pode ser removido
    client = models.ForeignKey(Client, on_delete=models.PROTECT, related_name='appointments')
    professional = models.ForeignKey(Professional, on_delete=models.PROTECT, related_name='appointments')

    class Meta:
        ordering = ['scheduled_at', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['professional', 'scheduled_at'],
                name='unique_professional_scheduled_at',
            ),
        ]

    def __str__(self):
        return f"{self.client.name} com {self.professional.name} @ {self.scheduled_at}"
