"""
Expense Tracker API test suite

- test_security.py: password policy and bearer token checks
- test_auth.py: signup, login, password change, session guard
- test_google_auth.py: Google popup flow outcomes
- test_profile.py, test_categories.py, test_expenses.py, test_budgets.py,
  test_goals.py: resource CRUD scoped to the signed-in user
- test_dashboard.py: summary arithmetic and endpoint
- test_app.py: health, root info, CORS and malformed bodies

Run all tests:
    pytest tests/
"""
