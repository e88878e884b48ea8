"""Hotkey-driven pause, capture and OCR of the foreground application."""
