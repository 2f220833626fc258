class GoalPlanError(Exception):
    """Base of the goal plan workflow errors"""
    status_code = 400
    default_message = "Goal plan operation failed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class PlanValidationError(GoalPlanError):
    default_message = "Goal plan is not valid"

    def __init__(self, errors, total=None, message=None):
        self.errors = errors
        self.total = total
        super().__init__(message)


class InvalidTransitionError(GoalPlanError):
    def __init__(self, status, action):
        self.status = status
        self.action = action
        super().__init__(f"Cannot {action} a plan in status '{status}'")


class AuthorizationError(GoalPlanError):
    status_code = 403
    default_message = "You are not allowed to perform this action on the plan"


class StaleRevisionError(GoalPlanError):
    status_code = 409

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Plan was changed by someone else (revision {actual}, expected {expected})")
