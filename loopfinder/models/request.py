from typing import List, Optional
from pydantic import BaseModel


class GenerateRoutesRequest(BaseModel):
    lat: Optional[float] = None
    lng: Optional[float] = None
    mode: Optional[str] = None
    quiet: bool = False
    exclude_bearings: Optional[List[int]] = None

    def has_origin(self) -> bool:
        return self.lat is not None and self.lng is not None
