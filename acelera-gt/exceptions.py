# acelera-gt/exceptions.py


class AceleraError(Exception):
    """Base class for business-rule violations raised by the store and academy."""


class SellerNotFoundError(AceleraError):
    def __init__(self, seller_id: str):
        super().__init__(f"Seller {seller_id} not found.")
        self.seller_id = seller_id


class MissionNotFoundError(AceleraError):
    def __init__(self, mission_id: str):
        super().__init__(f"Mission {mission_id} not found.")
        self.mission_id = mission_id


class QuizAlreadyCompletedError(AceleraError):
    pass


class DailyCourseLimitError(AceleraError):
    pass


class InvalidQuizScoreError(AceleraError):
    pass


class MissionAlreadyCompletedError(AceleraError):
    pass


class MissionNotActiveError(AceleraError):
    pass
