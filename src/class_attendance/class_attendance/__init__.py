"""Class Attendance package.

Feature modules (users, attendance) with SOLID service/repository layers and
a thin Flask controller layer on top.
"""
