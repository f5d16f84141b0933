itinerary_prompt = """You are an AI travel agent. Suggest a personalized itinerary for a trip to {city} with a budget of {budget} and interests: {interests}.
For each activity, return a structured JSON with:
- location (string)
- best_time_to_visit (string)
- cost (number)
- highlights (string)
- image (string, URL to a photo if possible)
Respond ONLY with a valid JSON object, no extra text, no markdown, no code fences, no explanation.
Format the response as:
{{
  "itinerary": [
    {{
      "day": 1,
      "activities": [
        {{
          "location": "...",
          "best_time_to_visit": "...",
          "cost": ...,
          "highlights": "...",
          "image": "..."
        }}
      ]
    }}
  ]
}}
"""

suggest_places_prompt = """Suggest {count} must-visit places in a city based on this user input: "{message}". For each, provide:
- name (string)
- description (string)
- rating (number, 1-5)
- image (string, URL to a photo if possible)
- cost (string, e.g. $, $$, $$$)
- info (string, 1-2 sentences with highlights or tips)
- lat (number, if available)
- lon (number, if available)
Respond ONLY with a valid JSON array, no extra text, no markdown, no code fences, no explanation. The array must be valid JSON parsable by a strict JSON parser.
"""

places_itinerary_prompt = """Create a {days}-day itinerary for a trip including these places: {places}.
Spread the places over the days in a sensible geographic order.
Respond ONLY with a valid JSON object, no extra text, no markdown, no code fences, no explanation.
Format the response as:
{{
  "itinerary": [
    {{
      "day": 1,
      "activities": [
        {{
          "location": "...",
          "best_time_to_visit": "...",
          "cost": ...,
          "highlights": "..."
        }}
      ]
    }}
  ]
}}
"""

qa_prompt = """You are an AI travel agent helping a traveller with their itinerary.
Given this itinerary: {itinerary}
Answer this question concisely: {question}
"""
