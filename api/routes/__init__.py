"""
HTTP routes, mounted under ``/api`` by ``main.create_app``.
"""
