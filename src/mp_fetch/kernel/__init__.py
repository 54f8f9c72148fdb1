"""Kernel – error taxonomy and result types shared by every layer."""
