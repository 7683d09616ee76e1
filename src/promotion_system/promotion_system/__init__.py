"""HR Promotion System package.

This package is organized by feature modules (organization, promotions,
appointments, events) with a thin Flask controller layer and
service/repository layers behind a MySQL unit of work.
"""
