# backend/dialoom/routes/__init__.py
