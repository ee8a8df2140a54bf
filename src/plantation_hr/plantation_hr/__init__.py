"""Plantation HR workflow package.

This package is organized by feature modules (holidays, attendance, leaves,
transfers, employees, ...) with a thin Flask controller layer and
service/repository layers underneath.
"""
