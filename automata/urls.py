from django.urls import path
from . import views

urlpatterns = [
    # Build (POST) or show (GET) the automaton held in the session
    path('api/automaton/', views.automaton, name='automaton'),

    # Test words against the session automaton
    path('api/automaton/test/', views.test_word, name='test_word'),
    path('api/automaton/test-stream/', views.test_word_stream, name='test_word_stream'),

    # Property checks on the session automaton
    path('api/automaton/properties/', views.properties, name='properties'),

    # Build and run in one request, without touching the session
    path('api/simulate/', views.simulate, name='simulate'),
]
