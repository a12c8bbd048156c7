from datetime import datetime, timezone
from supabase import Client
from fieldbase.core.exceptions import NotFoundError
from fieldbase.modules.users.schemas import ProfileResponse, ProfileUpdate


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_profile(self, user_id: str) -> ProfileResponse:
        """Get user profile by ID"""
        result = self.supabase.table("profiles")\
            .select("*")\
            .eq("id", user_id)\
            .limit(1)\
            .execute()

        if not result.data:
            raise NotFoundError("Profile")

        return ProfileResponse(**result.data[0])

    def update_profile(self, user_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Update the display name; email and id are owned by the identity provider"""
        result = self.supabase.table("profiles")\
            .update({
                "full_name": profile_data.full_name,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            })\
            .eq("id", user_id)\
            .execute()

        if not result.data:
            raise NotFoundError("Profile")

        return ProfileResponse(**result.data[0])
