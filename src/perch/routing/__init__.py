"""Logical page routing — the closed table of exact-match HTML routes."""

from perch.routing.pages import LOGICAL_PAGES, ROUTE_METHODS, LogicalPage, RouteTable

__all__ = ["LOGICAL_PAGES", "ROUTE_METHODS", "LogicalPage", "RouteTable"]
