"""Tests for the PetBudget integration."""
