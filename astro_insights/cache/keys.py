from astro_insights.domain.schemas import BirthInput


class CacheKeys:
    """
    Centralized cache key builders.

    Every key is derived from the birth identity (date, time, place).
    """

    @staticmethod
    def birth(birth: BirthInput) -> str:
        return "_".join(birth.identity)

    @staticmethod
    def insight(birth: BirthInput) -> str:
        return f"insight:{CacheKeys.birth(birth)}"

    @staticmethod
    def chart(birth: BirthInput) -> str:
        return f"chart:{CacheKeys.birth(birth)}"

    @staticmethod
    def vedic_chart(birth: BirthInput) -> str:
        return f"vedic:{CacheKeys.birth(birth)}"
