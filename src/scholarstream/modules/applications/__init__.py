"""
Applications Module

Scholarship applications: submission, review and fee payment.
"""

from scholarstream.modules.applications.models import Application, ApplicationStatus, PaymentStatus

__all__ = ["Application", "ApplicationStatus", "PaymentStatus"]
