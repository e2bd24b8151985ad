from rest_framework import serializers

from users.serializers import UserSummarySerializer
from .models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    actor = UserSummarySerializer(read_only=True)
    actor_role = serializers.CharField(source='actor.acting_role', read_only=True, default=None)
    action_display = serializers.CharField(source='get_action_display', read_only=True)

    class Meta:
        model = AuditLog
        fields = [
            'id', 'actor', 'actor_role', 'action', 'action_display',
            'target_model', 'target_object_id', 'details', 'timestamp'
        ]
        read_only_fields = fields
