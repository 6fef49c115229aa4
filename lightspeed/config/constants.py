# Endpoint paths, relative to "<LIGHTSPEED_URL>/api"
LIGHTSPEED_SUGGESTION_COMPLETION_URL = "v0/ai/completions/"
LIGHTSPEED_SUGGESTION_FEEDBACK_URL = "v0/ai/feedback/"
LIGHTSPEED_SUGGESTION_CONTENT_MATCHES_URL = "v0/ai/contentmatches/"
LIGHTSPEED_ME_URL = "v0/me/"

# Editor commands
LIGHTSPEED_SUGGESTION_HIDE = "ansible.lightspeed.inlineSuggest.hide"
LIGHTSPEED_THUMBS_UP_DOWN = "ansible.lightspeed.thumbsUpDown"

# Language service
PLAYBOOK_EXPLANATION_METHOD = "playbook/explanation"
ANSIBLE_LANGUAGE_ID = "ansible"

# User facing messages
UNKNOWN_ERROR = "An unknown error occurred."
NO_SUGGESTION_MESSAGE = (
    "Ansible Lightspeed does not have a suggestion based on your input."
)
FEEDBACK_THANKS_MESSAGE = "Thanks for your feedback!"
NOT_AUTHENTICATED_MESSAGE = "User not authenticated to use Ansible Lightspeed."
