"""
RegCost Services
================

- cost_estimation: regulation text to calibrated compliance cost estimates
"""
