# pipeline/undertone_analyzer.py
import logging
from typing import Iterable, Iterator, Tuple, Union

from ..models.errors import EmptySkinSetError
from ..models.image import Image
from ..models.undertone_analysis import UndertoneReport
from ..services.recommendation_service import RecommendationService
from ..services.undertone_service import UndertoneService

logger = logging.getLogger(__name__)


def analyze_image(
    img: Image,
    *,
    undertone_service: UndertoneService = None,
    recommendation_service: RecommendationService = None,
) -> UndertoneReport:
    """
    Classifies the undertone of *img* and attaches the matching palette:
      - Skin pixels selected by the HSV gate
      - Mean red / mean green ratio mapped to warm, cool or neutral
      - Static good / avoid colours and explanation for that undertone

    Args:
        img (Image): The decoded RGB image.
        undertone_service (UndertoneService): Runs the pixel scan.
        recommendation_service (RecommendationService): Looks up the palette.

    Returns:
        UndertoneReport for the image.

    Raises:
        EmptySkinSetError: no skin-toned pixel in the image.
        InvalidInputError: the pixel buffer is malformed.
    """
    undertone_service = undertone_service or UndertoneService()
    recommendation_service = recommendation_service or RecommendationService()

    analysis = undertone_service.analyze_pixels(img.pixels)
    recommendation = recommendation_service.get_recommendation(analysis.undertone)

    logger.info(
        f"{img.path.name if img.path else 'image'}: {analysis.undertone.value} "
        f"(R/G {analysis.ratio:.3f}, skin {analysis.skin_coverage:.1%})"
    )

    return UndertoneReport(
        analysis=analysis,
        recommendation=recommendation,
        tips=recommendation_service.get_tips(),
        path=img.path,
    )


def analyze_gallery(
    gallery: Iterable[Image],
    *,
    undertone_service: UndertoneService = None,
    recommendation_service: RecommendationService = None,
) -> Iterator[Tuple[Image, Union[UndertoneReport, EmptySkinSetError]]]:
    """
    Lazily analyse every image of *gallery*. Images without skin pixels yield
    their EmptySkinSetError instead of a report so one bad photo does not stop the batch.
    """
    undertone_service = undertone_service or UndertoneService()
    recommendation_service = recommendation_service or RecommendationService()

    for img in gallery:
        try:
            yield img, analyze_image(
                img,
                undertone_service=undertone_service,
                recommendation_service=recommendation_service,
            )
        except EmptySkinSetError as err:
            logger.warning(f"{img.path or 'image'}: {err}")
            yield img, err
