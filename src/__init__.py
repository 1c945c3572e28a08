"""Bakery Cost Tracker."""
