"""Team attendance package.

This package is organized by feature modules (events, groups, users,
attendance, audit) with a thin Flask controller layer and
service/repository layers underneath.
"""
