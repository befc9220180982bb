"""Example catalog resources (products and reviews) used by the chart demos and tests."""
