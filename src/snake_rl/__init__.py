"""Headless environment and autopilot policies for play-testing the snake core."""
