# Shared helpers for the ReWear backend
