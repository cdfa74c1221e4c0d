import copy

from rest_framework.exceptions import ValidationError

from events.services import is_team_full


def blank_member(is_leader=False):
    return {
        'name': '',
        'email': '',
        'phone': '',
        'college_name': '',
        'photo_url': '',
        'is_leader': is_leader,
    }


class TeamRoster:
    """
    The team list a student edits before registering.

    A roster always starts with the leader at position 0. Members can be
    added up to the event's maximum team size and removed by position, but
    the leader stays.
    """

    def __init__(self, event, leader=None):
        self.event = event
        first = blank_member(is_leader=True)
        if leader:
            first.update(leader)
            first['is_leader'] = True
        self._members = [first]

    def __len__(self):
        return len(self._members)

    @property
    def members(self):
        return copy.deepcopy(self._members)

    @property
    def is_full(self):
        return is_team_full(self.event, len(self._members))

    def add_member(self, member=None):
        if self.is_full:
            raise ValidationError("Maximum team size reached")
        entry = blank_member()
        if member:
            entry.update(member)
            entry['is_leader'] = False
        self._members.append(entry)
        return len(self._members) - 1

    def remove_member(self, index):
        if index < 0 or index >= len(self._members):
            raise ValidationError("Team member not found")
        if self._members[index]['is_leader']:
            raise ValidationError("Cannot remove team leader")
        del self._members[index]

    def update_member(self, index, **fields):
        if index < 0 or index >= len(self._members):
            raise ValidationError("Team member not found")
        fields.pop('is_leader', None)
        self._members[index].update(fields)
