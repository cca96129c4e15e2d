"""Kivy front-end for the workout session engine."""
