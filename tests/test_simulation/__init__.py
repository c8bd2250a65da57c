"""
Tests for the Simulation Module

Test modules:
    - test_models: Tests for simulation data models
    - test_engine: Tests for Monte Carlo simulation engine
    - test_scenarios: Tests for what-if, alliance search and bracket scenarios
"""
