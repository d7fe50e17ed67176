"""Billing module for Stripe subscriptions and plans."""

from teamhub.billing.plans import BILLING_PLANS, FREE_PLAN, Plan

__all__ = ["BILLING_PLANS", "FREE_PLAN", "Plan"]
