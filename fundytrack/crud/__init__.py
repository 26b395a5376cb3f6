from . import crud_user
from . import crud_category
from . import crud_transaction
from . import crud_budget
