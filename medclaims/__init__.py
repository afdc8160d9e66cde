"""
Medical Claims Service.

Role-based workflow for medical insurance claims, appointments, payments and
medical documents shared between patients, doctors, insurers and banks.
"""

__version__ = "1.0.0"
