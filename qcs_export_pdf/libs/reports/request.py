"""
Export Job Request

Builds the job description document submitted to the reports API.
"""

from typing import Any, Dict

from ..core.constants import ReportConstants


def build_export_request(app_id: str, object_id: str) -> Dict[str, Any]:
    """
    Build the request body that renders one visualization as a PDF.

    Args:
        app_id: Identifier of the app containing the visualization
        object_id: Identifier of the visualization object

    Returns:
        Dict ready to be sent as the JSON body of the report request
    """
    return {
        "type": ReportConstants.REQUEST_TYPE,
        "output": {
            "outputId": ReportConstants.OUTPUT_ID,
            "type": ReportConstants.OUTPUT_TYPE,
            "pdfOutput": {},
        },
        "senseImageTemplate": {
            "appId": app_id,
            "visualization": {
                "id": object_id,
                "widthPx": ReportConstants.WIDTH_PX,
                "heightPx": ReportConstants.HEIGHT_PX,
            },
        },
    }
