"""
Shared components for the fitness coach
"""
