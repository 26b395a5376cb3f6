from .aggregation import build_monthly_summary, MonthlySummary, SummaryInputError
from .budget_evaluation import evaluate_budget, BudgetEvaluation
