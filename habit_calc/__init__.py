"""Habit pet state calculation: rewards, resets and snapshot projection."""
