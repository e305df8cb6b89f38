"""Gestion des consultations et des marchés publics"""
