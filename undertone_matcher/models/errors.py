class UndertoneError(Exception):
    """Base class for every failure raised by the undertone analysis."""


class InvalidInputError(UndertoneError, ValueError):
    """
    The pixel buffer (or uploaded image) cannot be analysed at all:
    empty, wrong channel arity, or channel values outside [0, 255].
    """


class EmptySkinSetError(UndertoneError):
    """
    No pixel of the buffer passed the skin filter, so no red/green ratio exists.
    Kept distinct from a `neutral` result on purpose.
    """

    def __init__(self, total_pixel_count: int):
        self.total_pixel_count = total_pixel_count
        super().__init__(
            f"No skin-toned pixels found among {total_pixel_count} pixels; "
            f"no undertone could be determined"
        )
